"""Tests for the pygame gamepad provider (no controller needed)"""

import pytest
import pygame
from gamepads.gamepad_input import DEFAULT_AXES, DEFAULT_BUTTONS, GamepadInput


class FakeJoystick:
    """Stands in for pygame.joystick.Joystick"""

    def __init__(self, buttons=(), axes=None, hat=(0, 0), numaxes=6):
        self.buttons = set(buttons)
        self.axes = axes or {}
        self.hat = hat
        self.numaxes = numaxes

    def get_numbuttons(self):
        return 11

    def get_numaxes(self):
        return self.numaxes

    def get_numhats(self):
        return 1

    def get_button(self, index):
        return 1 if index in self.buttons else 0

    def get_axis(self, index):
        # Released triggers rest at -1.0
        default = -1.0 if index in (DEFAULT_AXES["left_trigger"], DEFAULT_AXES["right_trigger"]) else 0.0
        return self.axes.get(index, default)

    def get_hat(self, index):
        return self.hat


@pytest.fixture
def make_input(monkeypatch):
    monkeypatch.setattr(pygame.event, "pump", lambda: None)

    def factory(joystick):
        provider = GamepadInput(deadzone=0.1)
        provider._joystick = joystick
        provider._running = True
        return provider

    return factory


def test_not_started_returns_none():
    """Test reads before start return None"""
    assert GamepadInput().read_gamepad() is None


def test_released_controller(make_input):
    """Test a released controller reads as all-released"""
    state = make_input(FakeJoystick()).read_gamepad()

    assert state.pressed == []
    assert state.left_trigger == 0.0
    assert state.right_trigger == 0.0
    assert state.left_stick_y == 0.0


def test_buttons_and_dpad(make_input):
    """Test button indices and hat directions"""
    joystick = FakeJoystick(
        buttons=[DEFAULT_BUTTONS["a"], DEFAULT_BUTTONS["right_bumper"]],
        hat=(-1, 1),
    )
    state = make_input(joystick).read_gamepad()

    assert state.a is True
    assert state.right_bumper is True
    assert state.b is False
    assert state.dpad_up is True
    assert state.dpad_left is True
    assert state.dpad_down is False


def test_trigger_rescaled(make_input):
    """Test triggers map -1..1 to 0..1"""
    joystick = FakeJoystick(axes={DEFAULT_AXES["right_trigger"]: 1.0, DEFAULT_AXES["left_trigger"]: 0.0})
    state = make_input(joystick).read_gamepad()

    assert state.right_trigger == pytest.approx(1.0)
    assert state.left_trigger == pytest.approx(0.5)


def test_missing_trigger_axis_released(make_input):
    """Test controllers without trigger axes read released triggers"""
    state = make_input(FakeJoystick(numaxes=2)).read_gamepad()
    assert state.left_trigger == 0.0
    assert state.right_trigger == 0.0


def test_stick_y_inverted_and_deadzone(make_input):
    """Test pushing up is positive and drift is ignored"""
    joystick = FakeJoystick(axes={DEFAULT_AXES["left_stick_y"]: -0.8, DEFAULT_AXES["left_stick_x"]: 0.05})
    state = make_input(joystick).read_gamepad()

    assert state.left_stick_y == pytest.approx(0.8)
    assert state.left_stick_x == 0.0
