# pump_control.py
from __future__ import annotations

import logging

from gateway_client import GatewayClient
from models import PumpState

logger = logging.getLogger(__name__)


class PumpController:
    """
    Alterna el relé de la bomba. El estado mostrado solo cambia cuando el
    backend confirma la orden; no hay lectura posterior del estado real.
    """

    def __init__(self, client: GatewayClient) -> None:
        self.client = client

    def toggle(self, current: PumpState) -> PumpState:
        target = PumpState(current).opposite()
        self.client.set_pump_state(target)
        logger.info("Bomba cambiada %s -> %s", PumpState(current).value, target.value)
        return target
