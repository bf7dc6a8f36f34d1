"""
Payment Processor

Records payment attempts and marks orders paid. The gateway outcome is
delegated to an injected IPaymentGateway so tests can force either result.
"""

from decimal import Decimal
from uuid import UUID, uuid4

from storefront.application.interfaces import IPaymentGateway, IRepository, IUnitOfWorkFactory
from storefront.domain.entities import (
    Order,
    PaymentMethod,
    PaymentTransaction,
    TransactionStatus,
)
from storefront.domain.services import OrderStateMachine
from storefront.domain.value_objects import parse_decimal

from .base import ApplicationService, ErrorCode, ServiceResult, service_operation


def generate_transaction_id() -> str:
    """Gateway-style transaction reference."""
    return f"txn_{uuid4().hex}"


class PaymentProcessor(ApplicationService):
    """
    Service for payments against orders.

    Payments for one order are serialized on the order's lock, so an order
    cannot be charged twice by concurrent calls.
    """

    def __init__(
        self,
        payments: IRepository[PaymentTransaction],
        orders: IRepository[Order],
        gateway: IPaymentGateway,
        unit_of_work_factory: IUnitOfWorkFactory,
        state_machine: OrderStateMachine | None = None,
    ) -> None:
        super().__init__("PaymentProcessor")
        self._payments = payments
        self._orders = orders
        self._gateway = gateway
        self._unit_of_work_factory = unit_of_work_factory
        self._state_machine = state_machine or OrderStateMachine()

    def _is_payable(self, order: Order | None, user_id: UUID, amount: Decimal | None) -> bool:
        if order is None or amount is None:
            return False
        if order.user_id != user_id or order.total_amount != amount:
            return False
        return self._state_machine.can_accept_payment(order)

    @service_operation("process_payment")
    async def process_payment(
        self,
        order_id: UUID,
        user_id: UUID,
        amount: Decimal | float | int | str,
        method: PaymentMethod,
    ) -> ServiceResult[PaymentTransaction]:
        """
        Charge an order.

        The attempt is recorded whatever the gateway decides. On approval the
        order is marked Paid and a pending order moves to Processing. A declined
        payment is a partial result: ``success`` is False and ``data`` holds
        the recorded Failed transaction.

        Args:
            order_id: Order to pay
            user_id: User paying; must own the order
            amount: Amount charged; must equal the order total
            method: Payment method

        Returns:
            Result with the transaction, INVALID_PAYMENT or PAYMENT_DECLINED
        """
        charged = parse_decimal(amount)

        async with self._orders.locked(order_id):
            order = await self._orders.get(order_id)
            if not self._is_payable(order, user_id, charged):
                return self._failure(
                    ErrorCode.INVALID_PAYMENT,
                    "Invalid order or order already paid.",
                    order_id=order_id,
                    user_id=user_id,
                )

            approved = self._gateway.authorize(order_id, charged, method)

            async with self._unit_of_work_factory.create_unit_of_work() as uow:
                transaction = await uow.payments.add(
                    PaymentTransaction(
                        order_id=order_id,
                        user_id=user_id,
                        amount=charged,
                        method=method,
                        transaction_id=generate_transaction_id(),
                        status=TransactionStatus.SUCCESS if approved else TransactionStatus.FAILED,
                    )
                )
                if approved:
                    await uow.orders.update(
                        order_id, **self._state_machine.payment_changes(order)
                    )

        self.logger.info(
            "Payment recorded",
            extra={
                "order_id": str(order_id),
                "transaction_id": transaction.transaction_id,
                "status": transaction.status.value,
            },
        )

        if not approved:
            return self._failure(
                ErrorCode.PAYMENT_DECLINED,
                "Payment failed.",
                data=transaction,
                order_id=order_id,
            )
        return ServiceResult.success_response(transaction, message="Payment successful!")

    @service_operation("get_payment_history")
    async def get_payment_history(self, user_id: UUID) -> ServiceResult[list[PaymentTransaction]]:
        return ServiceResult.success_response(await self._payments.find_by("user_id", user_id))
