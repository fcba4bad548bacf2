"""Browser automation modules (Playwright).

Provides the Chromium session (``session``), navigation with network-idle
waits (``navigation``) and the launch configuration plus anti-detection
patches (``stealth``).
"""
