"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants for feed values and geometry defaults
- exceptions: Custom exception hierarchy
- diagnostics: Collector for recoverable, non-fatal problems
"""
