"""Archway: two-phase Arch Linux installer that survives its own reboot.

Core design goals:
- Marker-driven phase selection (pre-boot / post-boot)
- Self-deploying continuation into the installed system
- Fail-fast, strictly ordered steps
- Verified credentials before the first reboot
- Centralized logging
"""

__all__ = []
