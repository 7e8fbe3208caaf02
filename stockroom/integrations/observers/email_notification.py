import logging
from typing import Sequence

from stockroom.core.config import Settings
from stockroom.core.utils import format_money
from stockroom.integrations.base import StockObserver
from stockroom.schemas.inventory import ItemRead
from stockroom.services.notification_service import EmailNotificationService

logger = logging.getLogger(__name__)


class EmailNotificationObserver(StockObserver):
    """
    Sends up to three independent notices per transition:
    a change notice for significant moves, an urgent notice on depletion and
    a shipment-received notice for large increases.
    """

    def __init__(
        self,
        mailer: EmailNotificationService,
        inventory_recipients: Sequence[str] = (),
        urgent_recipients: Sequence[str] = (),
        warehouse_recipients: Sequence[str] = (),
        significant_change_threshold: int = 10,
        shipment_threshold: int = 50,
    ):
        self.mailer = mailer
        self.inventory_recipients = list(inventory_recipients)
        self.urgent_recipients = list(urgent_recipients)
        self.warehouse_recipients = list(warehouse_recipients)
        self.significant_change_threshold = significant_change_threshold
        self.shipment_threshold = shipment_threshold

    @classmethod
    def from_settings(cls, settings: Settings, mailer: EmailNotificationService):
        return cls(
            mailer=mailer,
            inventory_recipients=settings.INVENTORY_EMAILS,
            urgent_recipients=settings.PURCHASING_EMAILS + settings.MANAGER_EMAILS,
            warehouse_recipients=settings.WAREHOUSE_EMAILS,
            significant_change_threshold=settings.SIGNIFICANT_CHANGE_THRESHOLD,
            shipment_threshold=settings.SHIPMENT_RECEIVED_THRESHOLD,
        )

    async def on_stock_change(self, item: ItemRead, old_quantity: int, new_quantity: int) -> None:
        change_amount = abs(new_quantity - old_quantity)

        if change_amount >= self.significant_change_threshold:
            await self.send_stock_change_email(item, old_quantity, new_quantity, change_amount)

        if new_quantity == 0:
            await self.send_depletion_email(item)

        if new_quantity > old_quantity and change_amount >= self.shipment_threshold:
            await self.send_shipment_received_email(item, change_amount)

    async def send_stock_change_email(self, item: ItemRead, old_quantity: int, new_quantity: int, change_amount: int):
        direction = "increased" if new_quantity > old_quantity else "decreased"
        sign = "+" if new_quantity > old_quantity else "-"
        body = "\n".join([
            f"Stock level {direction} for: {item.name}",
            f"Item ID: {item.id}",
            f"Previous Quantity: {old_quantity} units",
            f"New Quantity: {new_quantity} units",
            f"Change: {sign}{change_amount} units",
            f"Price: {format_money(item.price)}",
            f"Value Change: {format_money(item.price * change_amount)}",
        ])
        logger.info(f"Stock update email for {item.name}: {old_quantity} -> {new_quantity}")
        await self.mailer.send(self.inventory_recipients, f"Stock Update - {item.name}", body)

    async def send_depletion_email(self, item: ItemRead):
        logger.warning(f"Urgent depletion email for {item.name} (ID: {item.id})")
        await self.mailer.send(
            self.urgent_recipients,
            f"URGENT - {item.name} is OUT OF STOCK",
            f"Item {item.name} (ID: {item.id}) has run out of stock. Immediate restocking required.",
            priority="high",
        )

    async def send_shipment_received_email(self, item: ItemRead, quantity_added: int):
        logger.info(f"Shipment received email for {item.name}: +{quantity_added} units")
        await self.mailer.send(
            self.warehouse_recipients,
            f"Shipment Received - {item.name}",
            f"Received shipment of {quantity_added} units for {item.name}",
        )
