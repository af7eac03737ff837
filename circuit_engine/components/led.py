from .base import ConductanceModel


class LEDModel(ConductanceModel):
    """
    LED approximated by a fixed resistor.

    There is no diode curve and no threshold voltage; the component value is
    ignored and settings.led_resistance is used in every analysis.
    """

    kind = "led"

    def resistance(self) -> float:
        return self.settings.led_resistance
