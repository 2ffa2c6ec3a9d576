"""Kernel – errors, clock and messaging primitives shared by the transport."""
