"""LED command - show one pattern on the puck."""

import click

from mutepuck.devices import HidapiTransport, LedActuator, encode_led
from mutepuck.exceptions import DeviceNotFoundError
from mutepuck.models import Event, PuckConfig, State


@click.command()
@click.argument(
    'state',
    type=click.Choice([s.value for s in State] + ['off'], case_sensitive=False),
)
@click.option('--press', is_flag=True, help='Show the pattern used while the button is held')
@click.pass_context
def led(ctx, state: str, press: bool):
    """
    Show the LED pattern for a mute state (hardware check).

    \b
    Examples:
      mutepuck led muted
      mutepuck led unmuted --press
      mutepuck led off
    """
    config: PuckConfig = ctx.obj['config']
    transport = HidapiTransport(config.vendor_id, config.product_id)

    try:
        # Fail early with a helpful message instead of a silent no-op
        transport.open().close()
    except DeviceNotFoundError as e:
        raise click.ClickException(e.get_full_message())

    actuator = LedActuator(transport)
    if state.lower() == 'off':
        ok = actuator.clear()
        value = 0
    else:
        parsed = State(state.lower())
        event = Event.PRESS if press else Event.RELEASE
        ok = actuator.render(parsed, event)
        value = encode_led(parsed, event)

    if not ok:
        raise click.ClickException("Writing to the mute device failed")
    click.echo(f"[OK] LED set to 0x{value:02x}")
