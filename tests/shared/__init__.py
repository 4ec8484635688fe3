"""Shared testing utilities for the Gravity Forms MCP project.

- fake_api.py: In-memory entries API served through httpx.MockTransport
- tool_calls.py: Calling registered MCP tools in-process
"""
