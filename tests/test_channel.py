"""Tests for clamped channels and actuators"""

import pytest
from teleop.channel import Actuator, ClampedChannel, clamp
from teleop.types import ActuatorSpec, ChannelKind, Direction


@pytest.fixture
def power_channel():
    """Shooter-style power channel in [0, 1]"""
    return ClampedChannel("shooter", minimum=0.0, maximum=1.0, initial=0.5, step=0.05)


@pytest.fixture
def intake():
    """Toggled, directional intake at fixed 90% power"""
    return Actuator(ActuatorSpec("intake", initial=0.9, toggled=True, directional=True))


def test_clamp():
    """Test clamp helper"""
    assert clamp(1.5, 0.0, 1.0) == 1.0
    assert clamp(-0.5, 0.0, 1.0) == 0.0
    assert clamp(0.3, 0.0, 1.0) == 0.3


def test_default_bounds_by_kind():
    """Test bounds default to the kind's full range"""
    power = ClampedChannel("motor")
    assert power.bounds == (-1.0, 1.0)

    servo = ClampedChannel("servo", kind=ChannelKind.POSITION)
    assert servo.bounds == (0.0, 1.0)


def test_bounds_out_of_order_rejected():
    """Test min > max is refused at construction"""
    with pytest.raises(ValueError):
        ClampedChannel("servo", kind=ChannelKind.POSITION, minimum=1.0, maximum=0.0)


def test_initial_value_clamped():
    """Test out-of-range initial value is saturated"""
    channel = ClampedChannel("servo", kind=ChannelKind.POSITION, initial=1.7)
    assert channel.value == 1.0


@pytest.mark.parametrize("value", [-10.0, -1.0, -0.01, 0.0, 0.42, 1.0, 1.0001, 7.5])
def test_set_absolute_stays_in_bounds(power_channel, value):
    """Test absolute writes never leave [min, max]"""
    result = power_channel.set_absolute(value)
    assert 0.0 <= result <= 1.0
    assert power_channel.get() == result


@pytest.mark.parametrize("delta", [-3.0, -0.5, -0.05, 0.0, 0.05, 0.5, 3.0])
def test_adjust_relative_stays_in_bounds(power_channel, delta):
    """Test relative writes never leave [min, max]"""
    for _ in range(30):
        power_channel.adjust_relative(delta)
        assert 0.0 <= power_channel.value <= 1.0


def test_set_absolute_idempotent(power_channel):
    """Test setting max twice equals setting it once"""
    power_channel.set_absolute(1.0)
    once = power_channel.value
    power_channel.set_absolute(1.0)
    assert power_channel.value == once == 1.0


def test_adjust_saturates_at_max(power_channel):
    """Test 0.95 + 0.05 saturates exactly at 1.0"""
    power_channel.set_absolute(0.95)
    result = power_channel.adjust_relative(0.05)
    assert result == pytest.approx(1.0)
    assert result <= 1.0

    result = power_channel.adjust_relative(0.05)
    assert result == 1.0


def test_adjust_position_down():
    """Test servo nudge down from 0.10 by 0.5 * 0.02"""
    servo = ClampedChannel("aim", kind=ChannelKind.POSITION, initial=0.10, step=0.02)
    result = servo.adjust_relative(-0.02 * 0.5)
    assert result == pytest.approx(0.09)

    servo.set_absolute(0.005)
    assert servo.adjust_relative(-0.01) == 0.0


def test_toggle_command(intake):
    """Test toggle drives preset when running, 0 otherwise"""
    assert intake.running is False
    assert intake.command() == 0.0

    assert intake.toggle() is True
    assert intake.command() == pytest.approx(0.9)

    assert intake.toggle() is False
    assert intake.command() == 0.0


def test_direction_command(intake):
    """Test direction selects the sign of the magnitude"""
    intake.toggle()
    intake.set_direction(Direction.REVERSE)
    assert intake.command() == pytest.approx(-0.9)

    intake.set_direction(Direction.FORWARD)
    assert intake.command() == pytest.approx(0.9)


def test_direction_persists_while_stopped(intake):
    """Test direction selection survives a stop/start cycle"""
    intake.set_direction(Direction.REVERSE)
    assert intake.command() == 0.0

    intake.toggle()
    assert intake.command() == pytest.approx(-0.9)


def test_preset_overrides_setpoint():
    """Test fixed-power outputs ignore the channel setpoint"""
    shooter = Actuator(ActuatorSpec("shooter", initial=0.5, minimum=0.0, maximum=1.0, toggled=True))
    shooter.toggle()
    assert shooter.command() == pytest.approx(0.5)
    assert shooter.command(preset=0.75) == pytest.approx(0.75)


def test_untoggled_position_command():
    """Test positional servos command their setpoint directly"""
    aim = Actuator(ActuatorSpec("aim", kind=ChannelKind.POSITION, initial=0.1))
    assert aim.running is False
    assert aim.command() == pytest.approx(0.1)


def test_set_running(intake):
    """Test explicit running flag"""
    intake.set_running(True)
    assert intake.running is True
    intake.set_running(True)
    assert intake.running is True
    intake.set_running(False)
    assert intake.running is False


def test_neutral():
    """Test shutdown commands per kind"""
    motor = Actuator(ActuatorSpec("intake", initial=0.9, toggled=True))
    servo = Actuator(ActuatorSpec("aim", kind=ChannelKind.POSITION, minimum=0.1, initial=0.5))
    assert motor.neutral == 0.0
    assert servo.neutral == 0.1


def test_position_name():
    """Test named positions with tolerance"""
    aim = Actuator(ActuatorSpec(
        "aim",
        kind=ChannelKind.POSITION,
        named_positions={"Retracted": 0.0, "Extended": 0.17},
    ))
    assert aim.position_name() == "Retracted"

    aim.channel.set_absolute(0.175)
    assert aim.position_name() == "Extended"

    aim.channel.set_absolute(0.5)
    assert aim.position_name() == "Custom"


def test_status(intake):
    """Test display status"""
    intake.toggle()
    status = intake.status(present=False)
    assert status.name == "intake"
    assert status.running is True
    assert status.direction is Direction.FORWARD
    assert status.present is False
    assert status.setpoint == pytest.approx(0.9)
