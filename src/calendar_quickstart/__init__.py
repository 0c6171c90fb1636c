"""calendar-quickstart - Google sign-in and upcoming calendar events.

Usage:
    from calendar_quickstart.cli import build_controller

    controller = build_controller()
    await controller.initialize()
    if not controller.state.authorized:
        await controller.authorize()
    print(controller.render())
"""

__version__ = "0.1.0"
