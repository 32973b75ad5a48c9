"""carechat: client-side session controller for the care home conversation service.

Usage:
    from carechat.config import get_settings
    from carechat.session import build_controller

    controller = build_controller(get_settings())
    await controller.restore()
    await controller.login("alice", "pw1")
    await controller.start()
"""
