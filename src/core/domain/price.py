"""
PriceReading — снимок ответа внешнего оракула

Неизменяемая Pydantic модель одного раунда `latest_price()`. Ответ знаковый:
значение <= 0 здесь представимо и отклоняется адаптером оракула как
InvalidPrice, но никогда не приводится к нулю.
"""

from pydantic import BaseModel, Field


class PriceReading(BaseModel):
    """
    Последний раунд оракула.

    Арифметику наград определяет только `price`; timestamp и round_id
    нужны для диагностики и опционального порога устаревания.
    """

    price: int = Field(..., description="Знаковый ответ, decimals фида")
    timestamp: int = Field(..., ge=0, description="Время обновления раунда (unix, сек)")
    round_id: int = Field(..., ge=0, description="Идентификатор раунда оракула")

    model_config = {"frozen": True}

    @property
    def is_valid(self) -> bool:
        """Пригоден ли ответ для расчёта наград."""
        return self.price > 0
