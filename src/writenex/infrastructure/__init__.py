"""Infrastructure layer: filesystem scans, cache, watcher, workspace.

Functions here do real I/O and raise on failure (``OSError``,
``ValueError``). The service layer turns those into ServiceResult.
"""
