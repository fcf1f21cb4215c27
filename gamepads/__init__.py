"""Input provider implementations"""

from gamepads.mock_input import MockInput, TestScripts
from gamepads.gamepad_input import GamepadInput

__all__ = ["MockInput", "TestScripts", "GamepadInput"]
