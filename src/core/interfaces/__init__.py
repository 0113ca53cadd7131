"""Interfaces of the core.

Contracts (Protocol) implemented by concrete adapters, so the core depends
on abstractions rather than on httpx or any other I/O library.
"""
