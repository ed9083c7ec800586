"""Per-type validation rule table and duplicate rules.

Each data type is described by an ImportRules entry: which columns are
required, which hold enumerated values, numbers, positive whole quantities,
dates or other fixed formats, and a duplicate rule that compares a row
against rows loaded once from the store.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol

from zuq.repositories import Repositories, Row

from .constants import (
    EQUIPMENT_CATEGORIES,
    MOVEMENT_TYPES,
    READER_CONDITIONS,
    READER_STATUSES,
)
from .converters import br_date_to_iso, is_present, parse_number

CNPJ_RE = re.compile(r"^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class DuplicateContext:
    """Inputs shared by the duplicate rules of one validation run."""

    repos: Repositories
    now: datetime
    movement_lookback_days: int = 30
    order_lookback_days: int = 90


@dataclass(frozen=True)
class DuplicateMatch:
    row_id: str
    message: str


class DuplicateRule(Protocol):
    """Finds an existing row that a new record would duplicate."""

    key_fields: tuple[str, ...]

    async def load(self, ctx: DuplicateContext) -> Any: ...

    def find(self, data: dict[str, Any], existing: Any) -> DuplicateMatch | None: ...


def _text(data: dict[str, Any], key: str) -> str:
    return str(data.get(key, "")).strip()


def _same(a: Any, b: Any) -> bool:
    """Case-insensitive equality for text fields."""
    if a is None or b is None:
        return False
    return str(a).strip().lower() == str(b).strip().lower()


def _index_by_id(rows: list[Row]) -> dict[str, Row]:
    return {row["id"]: row for row in rows}


def _iso_day(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value)[:10]


class EquipmentDuplicateRule:
    """Same brand and model (case-insensitive) in the same category."""

    key_fields = ("marca", "modelo", "categoria")

    async def load(self, ctx: DuplicateContext) -> list[Row]:
        return await ctx.repos.equipment.list_all()

    def find(self, data: dict[str, Any], existing: list[Row]) -> DuplicateMatch | None:
        for eq in existing:
            if (
                _same(eq.get("brand"), data["marca"])
                and _same(eq.get("model"), data["modelo"])
                and eq.get("category") == _text(data, "categoria")
            ):
                return DuplicateMatch(
                    eq["id"],
                    f"Equipamento já existe: {eq['brand']} {eq['model']} ({eq['category']})",
                )
        return None


class SupplierDuplicateRule:
    """Same CNPJ, or failing that the same name (case-insensitive)."""

    key_fields = ("cnpj",)

    async def load(self, ctx: DuplicateContext) -> list[Row]:
        return await ctx.repos.suppliers.list_all()

    def find(self, data: dict[str, Any], existing: list[Row]) -> DuplicateMatch | None:
        cnpj = _text(data, "cnpj")
        for sup in existing:
            if sup.get("cnpj") == cnpj:
                return DuplicateMatch(sup["id"], f"CNPJ já cadastrado: {sup['cnpj']} ({sup['name']})")
        if is_present(data.get("nome")):
            for sup in existing:
                if _same(sup.get("name"), data["nome"]):
                    return DuplicateMatch(sup["id"], f"Nome já cadastrado: {sup['name']}")
        return None


class ReaderDuplicateRule:
    """Same reader code."""

    key_fields = ("codigo",)

    async def load(self, ctx: DuplicateContext) -> list[Row]:
        return await ctx.repos.readers.list_all()

    def find(self, data: dict[str, Any], existing: list[Row]) -> DuplicateMatch | None:
        code = _text(data, "codigo")
        for reader in existing:
            if reader.get("code") == code:
                return DuplicateMatch(reader["id"], f"Código já cadastrado: {reader['code']}")
        return None


@dataclass
class _RecentMovements:
    movements: list[Row]
    equipment: dict[str, Row]


class MovementDuplicateRule:
    """Same equipment, type, quantity and day among recent movements."""

    key_fields = ("equipamento_marca", "equipamento_modelo", "tipo_movimento", "quantidade", "data")

    async def load(self, ctx: DuplicateContext) -> _RecentMovements:
        since = ctx.now - timedelta(days=ctx.movement_lookback_days)
        movements = await ctx.repos.movements.list_range("movement_date", start=since)
        equipment = _index_by_id(await ctx.repos.equipment.list_all())
        return _RecentMovements(movements, equipment)

    def find(self, data: dict[str, Any], existing: _RecentMovements) -> DuplicateMatch | None:
        day = br_date_to_iso(data["data"])
        quantity = parse_number(data["quantidade"])
        if day is None or quantity is None:
            return None
        for mov in existing.movements:
            eq = existing.equipment.get(mov.get("equipment_id"))
            if eq is None:
                continue
            if (
                _same(eq.get("brand"), data["equipamento_marca"])
                and _same(eq.get("model"), data["equipamento_modelo"])
                and mov.get("movement_type") == _text(data, "tipo_movimento")
                and mov.get("quantity") == quantity
                and _iso_day(mov.get("movement_date")) == day
            ):
                return DuplicateMatch(mov["id"], "Movimentação similar já existe para esta data")
        return None


@dataclass
class _RecentOrders:
    orders: list[Row]
    equipment: dict[str, Row]
    suppliers: dict[str, Row]


class OrderDuplicateRule:
    """Same equipment, supplier and expected arrival among recent orders."""

    key_fields = ("equipamento_marca", "equipamento_modelo", "fornecedor_nome", "data_chegada_esperada")

    async def load(self, ctx: DuplicateContext) -> _RecentOrders:
        since = ctx.now - timedelta(days=ctx.order_lookback_days)
        orders = await ctx.repos.orders.list_range("created_at", start=since)
        equipment = _index_by_id(await ctx.repos.equipment.list_all())
        suppliers = _index_by_id(await ctx.repos.suppliers.list_all())
        return _RecentOrders(orders, equipment, suppliers)

    def find(self, data: dict[str, Any], existing: _RecentOrders) -> DuplicateMatch | None:
        day = br_date_to_iso(data["data_chegada_esperada"])
        if day is None:
            return None
        for order in existing.orders:
            eq = existing.equipment.get(order.get("equipment_id"))
            sup = existing.suppliers.get(order.get("supplier_id"))
            if eq is None or sup is None:
                continue
            if (
                _same(eq.get("brand"), data["equipamento_marca"])
                and _same(eq.get("model"), data["equipamento_modelo"])
                and _same(sup.get("name"), data["fornecedor_nome"])
                and _iso_day(order.get("expected_arrival_date")) == day
            ):
                return DuplicateMatch(order["id"], "Pedido similar já existe para esta data")
        return None


@dataclass(frozen=True)
class FormatCheck:
    field: str
    pattern: re.Pattern
    message: str


@dataclass(frozen=True)
class ImportRules:
    """Validation rules for one data type.

    Dict-valued entries map a column to the error message used when the
    column fails that check. Enum entries also carry the allowed values.
    """

    required: tuple[str, ...]
    duplicate_rule: DuplicateRule
    enums: dict[str, tuple[str, list[str]]] = field(default_factory=dict)
    formats: tuple[FormatCheck, ...] = ()
    numeric: dict[str, str] = field(default_factory=dict)
    positive: dict[str, str] = field(default_factory=dict)
    dates: dict[str, str] = field(default_factory=dict)


RULES: dict[str, ImportRules] = {
    "equipamentos": ImportRules(
        required=("marca", "modelo", "categoria"),
        enums={"categoria": ("Categoria", EQUIPMENT_CATEGORIES)},
        numeric={
            "preco_medio": "Preço médio deve ser um número",
            "estoque_minimo": "Estoque mínimo deve ser um número",
            "estoque_inicial": "Estoque inicial deve ser um número",
        },
        duplicate_rule=EquipmentDuplicateRule(),
    ),
    "fornecedores": ImportRules(
        required=("nome", "cnpj"),
        formats=(
            FormatCheck("cnpj", CNPJ_RE, "CNPJ deve estar no formato XX.XXX.XXX/XXXX-XX"),
            FormatCheck("email", EMAIL_RE, "Email deve ter formato válido"),
        ),
        numeric={"dias_entrega_media": "Dias de entrega deve ser um número"},
        duplicate_rule=SupplierDuplicateRule(),
    ),
    "leitoras": ImportRules(
        required=("codigo", "equipamento_marca", "equipamento_modelo"),
        enums={
            "status": ("Status", READER_STATUSES),
            "condicao": ("Condição", READER_CONDITIONS),
        },
        dates={"data_aquisicao": "Data de aquisição deve estar no formato DD/MM/AAAA"},
        duplicate_rule=ReaderDuplicateRule(),
    ),
    "movimentacoes": ImportRules(
        required=("equipamento_marca", "equipamento_modelo", "tipo_movimento", "quantidade"),
        enums={"tipo_movimento": ("Tipo de movimento", MOVEMENT_TYPES)},
        positive={"quantidade": "Quantidade deve ser um número inteiro positivo"},
        dates={"data": "Data deve estar no formato DD/MM/AAAA"},
        duplicate_rule=MovementDuplicateRule(),
    ),
    "pedidos": ImportRules(
        required=("equipamento_marca", "equipamento_modelo", "fornecedor_nome", "quantidade"),
        positive={"quantidade": "Quantidade deve ser um número inteiro positivo"},
        dates={"data_chegada_esperada": "Data de chegada deve estar no formato DD/MM/AAAA"},
        duplicate_rule=OrderDuplicateRule(),
    ),
}
