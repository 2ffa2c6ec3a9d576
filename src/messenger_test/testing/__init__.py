"""Testing support – pytest fixtures for the test transport.

Needs pytest (``pip install messenger-test[testing]``). Enable in your
``conftest.py``::

    pytest_plugins = ["messenger_test.testing.fixtures"]
"""
