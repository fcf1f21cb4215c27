"""Tests for the binding table and action interpretation"""

import pytest
from teleop.bindings import (
    AdjustRelative,
    Binding,
    SetAbsolute,
    SetDirection,
    SetFineMode,
    SetRunning,
    StopAll,
    ToggleRunning,
    Trigger,
    apply_action,
    competition_bindings,
    default_bindings,
    describe,
    validate_bindings,
)
from teleop.channel import Actuator
from teleop.types import ActuatorSpec, ChannelKind, Direction


@pytest.fixture
def actuators():
    """Intake, shooter, aim servo and ball loader like the match robot"""
    specs = [
        ActuatorSpec("intake", initial=0.9, toggled=True, directional=True),
        ActuatorSpec("shooter", initial=0.5, step=0.05, minimum=0.0, maximum=1.0, toggled=True),
        ActuatorSpec("aim", kind=ChannelKind.POSITION, initial=0.0, step=0.02),
        ActuatorSpec("loader", initial=1.0, toggled=True, directional=True),
    ]
    return {spec.name: Actuator(spec) for spec in specs}


def test_unknown_signal_rejected():
    """Test bindings only accept real gamepad signals"""
    with pytest.raises(ValueError):
        Binding("turbo", Trigger.RISING, "shooter", ToggleRunning())


def test_trigger_is_edge():
    """Test edge trigger classification"""
    assert Trigger.RISING.is_edge is True
    assert Trigger.FALLING.is_edge is True
    assert Trigger.HELD.is_edge is False
    assert Trigger.AXIS.is_edge is False


def test_validate_unknown_actuator(actuators):
    """Test bindings to missing actuators are rejected"""
    bindings = [Binding("a", Trigger.RISING, "climber", ToggleRunning())]
    with pytest.raises(ValueError):
        validate_bindings(bindings, actuators)


def test_validate_toggle_needs_running_flag(actuators):
    """Test toggling an untoggled actuator is rejected"""
    bindings = [Binding("a", Trigger.RISING, "aim", ToggleRunning())]
    with pytest.raises(ValueError):
        validate_bindings(bindings, actuators)


def test_validate_direction_needs_directional(actuators):
    """Test direction on a non-directional actuator is rejected"""
    bindings = [Binding("dpad_left", Trigger.RISING, "shooter", SetDirection(Direction.REVERSE))]
    with pytest.raises(ValueError):
        validate_bindings(bindings, actuators)


def test_default_bindings_valid(actuators):
    """Test the default table matches the default actuators"""
    validate_bindings(default_bindings(), actuators)


def test_set_absolute(actuators):
    """Test preset jumps and saturates"""
    shooter = actuators["shooter"]
    apply_action(SetAbsolute(0.75), shooter, actuators)
    assert shooter.channel.value == 0.75

    apply_action(SetAbsolute(1.4), shooter, actuators)
    assert shooter.channel.value == 1.0


def test_adjust_relative_normal_and_fine(actuators):
    """Test step size halves in fine mode"""
    shooter = actuators["shooter"]
    apply_action(AdjustRelative(+1.0), shooter, actuators)
    assert shooter.channel.value == pytest.approx(0.55)

    apply_action(SetFineMode(True), shooter, actuators)
    apply_action(AdjustRelative(-1.0), shooter, actuators, fine_step_scale=0.5)
    assert shooter.channel.value == pytest.approx(0.525)


def test_adjust_relative_scaled_by_magnitude(actuators):
    """Test axis magnitude scales the step"""
    aim = actuators["aim"]
    aim.channel.set_absolute(0.10)
    apply_action(AdjustRelative(-1.0), aim, actuators, magnitude=0.5)
    assert aim.channel.value == pytest.approx(0.09)


def test_adjust_relative_ceiling(actuators):
    """Test extension stops at the ceiling below the channel max"""
    aim = actuators["aim"]
    aim.channel.set_absolute(0.16)
    apply_action(AdjustRelative(+1.0, ceiling=0.17), aim, actuators, magnitude=1.0)
    assert aim.channel.value == pytest.approx(0.17)

    apply_action(AdjustRelative(+1.0, ceiling=0.17), aim, actuators, magnitude=1.0)
    assert aim.channel.value == pytest.approx(0.17)
    assert aim.channel.maximum == 1.0


def test_adjust_relative_floor(actuators):
    """Test retraction stops at the floor"""
    aim = actuators["aim"]
    aim.channel.set_absolute(0.01)
    apply_action(AdjustRelative(-1.0, floor=0.0), aim, actuators)
    assert aim.channel.value == 0.0


def test_toggle_running(actuators):
    """Test toggle flips the running flag"""
    intake = actuators["intake"]
    apply_action(ToggleRunning(), intake, actuators)
    assert intake.running is True
    apply_action(ToggleRunning(), intake, actuators)
    assert intake.running is False


def test_set_direction(actuators):
    """Test direction selection"""
    intake = actuators["intake"]
    apply_action(SetDirection(Direction.REVERSE), intake, actuators)
    assert intake.direction is Direction.REVERSE


def test_stop_all(actuators):
    """Test StopAll stops every toggled actuator"""
    actuators["intake"].toggle()
    actuators["shooter"].toggle()

    apply_action(StopAll(), actuators["shooter"], actuators)

    assert actuators["intake"].running is False
    assert actuators["shooter"].running is False


def test_unknown_action(actuators):
    """Test unknown action types are a programming error"""
    with pytest.raises(TypeError):
        apply_action("spin", actuators["shooter"], actuators)


def test_default_bindings_layout():
    """Test the default table's key rows"""
    table = {(b.signal, b.trigger): b for b in default_bindings()}

    assert table[("a", Trigger.RISING)].action == ToggleRunning()
    assert table[("dpad_left", Trigger.RISING)].action == SetDirection(Direction.REVERSE)
    assert table[("dpad_right", Trigger.RISING)].action == SetDirection(Direction.FORWARD)
    assert table[("x", Trigger.HELD)].action == SetAbsolute(0.75)
    assert table[("y", Trigger.HELD)].action == SetAbsolute(1.0)
    assert table[("right_trigger", Trigger.AXIS)].action == AdjustRelative(+1.0, ceiling=0.17)
    assert table[("right_stick_button", Trigger.HELD)].action == SetAbsolute(0.17)


def test_describe():
    """Test controls help is grouped per actuator"""
    help_lines = describe(default_bindings())
    assert set(help_lines) == {"intake", "shooter", "aim"}
    assert "a (rising): toggle on/off" in help_lines["intake"]


def test_set_running(actuators):
    """Test explicit start and stop"""
    loader = actuators["loader"]
    apply_action(SetRunning(True), loader, actuators)
    apply_action(SetRunning(True), loader, actuators)
    assert loader.running is True

    apply_action(SetRunning(False), loader, actuators)
    assert loader.running is False


def test_validate_set_running_needs_running_flag(actuators):
    """Test starting an untoggled actuator is rejected"""
    bindings = [Binding("b", Trigger.RISING, "aim", SetRunning(True))]
    with pytest.raises(ValueError):
        validate_bindings(bindings, actuators)


def test_competition_bindings_valid(actuators):
    """Test the match table matches the match actuators"""
    validate_bindings(competition_bindings(), actuators)


def test_competition_all_edge_triggered():
    """Test every match binding fires once per press"""
    assert all(binding.trigger is Trigger.RISING for binding in competition_bindings())


@pytest.mark.parametrize("signal,actuator,actions", [
    ("x", "shooter", [ToggleRunning()]),
    ("left_bumper", "shooter", [AdjustRelative(-1.0)]),
    ("right_bumper", "shooter", [AdjustRelative(+1.0)]),
    ("a", "aim", [AdjustRelative(+1.0)]),
    ("y", "aim", [AdjustRelative(-1.0)]),
    ("left_stick_button", "aim", [SetAbsolute(0.0)]),
    ("dpad_down", "aim", [SetAbsolute(0.33)]),
    ("dpad_up", "aim", [SetAbsolute(0.67)]),
    ("right_stick_button", "aim", [SetAbsolute(1.0)]),
    ("b", "intake", [SetDirection(Direction.REVERSE), SetRunning(True)]),
    ("dpad_left", "loader", [SetDirection(Direction.REVERSE), SetRunning(True)]),
    ("dpad_right", "loader", [SetRunning(False)]),
    ("back", "shooter", [StopAll()]),
])
def test_competition_layout(signal, actuator, actions):
    """Test each match button's rows, in order"""
    rows = [b for b in competition_bindings() if b.signal == signal]
    assert [b.actuator for b in rows] == [actuator] * len(actions)
    assert [b.action for b in rows] == actions


def test_competition_aim_positions_parametrised():
    """Test custom aim positions flow into the table"""
    rows = competition_bindings(aim_positions=(0.1, 0.2, 0.3, 0.4))
    presets = [b.action.value for b in rows if isinstance(b.action, SetAbsolute)]
    assert presets == [0.1, 0.2, 0.3, 0.4]


def test_describe_set_running():
    """Test start/stop wording in controls help"""
    help_lines = describe(competition_bindings())
    assert "dpad_right (rising): stop" in help_lines["loader"]
    assert "b (rising): start" in help_lines["intake"]
