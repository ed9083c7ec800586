"""Constants for the bulk import pipeline: data types, labels and template guide."""

from typing import Any

from zuq.models import (
    EquipmentCategory,
    ImportDataType,
    MovementType,
    ReaderCondition,
    ReaderStatus,
)

# Hard limit on number of data rows parsed from one file
MAX_ROWS = 5000

# Upload extensions accepted by the parser
SUPPORTED_EXTENSIONS = (".csv", ".xlsx")

DATA_TYPES = tuple(t.value for t in ImportDataType)

EQUIPMENT_CATEGORIES = [c.value for c in EquipmentCategory]
READER_STATUSES = [s.value for s in ReaderStatus]
READER_CONDITIONS = [c.value for c in ReaderCondition]
MOVEMENT_TYPES = [t.value for t in MovementType]

DATA_TYPE_LABELS = {
    "equipamentos": "Equipamentos",
    "fornecedores": "Fornecedores",
    "leitoras": "Leitoras",
    "movimentacoes": "Movimentações",
    "pedidos": "Pedidos",
}

IMPORT_STATUS_LABELS = {
    "completed": "Concluído",
    "pending": "Pendente",
    "error": "Erro",
}


def _col(name: str, col_type: str, required: bool, description: str) -> dict[str, Any]:
    return {"name": name, "type": col_type, "required": required, "description": description}


# Column guide per data type, in template column order
TEMPLATE_CONFIGS: dict[str, dict[str, Any]] = {
    "equipamentos": {
        "label": "Equipamentos",
        "description": "Template para importação de equipamentos",
        "columns": [
            _col("marca", "Texto", True, "Marca do equipamento"),
            _col("modelo", "Texto", True, "Modelo do equipamento"),
            _col("categoria", "Texto", True, "Leitora, Sensor, Rastreador ou Acessório"),
            _col("preco_medio", "Número", False, "Preço médio em reais"),
            _col("estoque_minimo", "Número", False, "Estoque mínimo recomendado"),
            _col("estoque_inicial", "Número", False, "Quantidade inicial em estoque"),
            _col("fornecedor_nome", "Texto", False, "Nome do fornecedor (deve existir)"),
        ],
        "sample": ["Zebra", "MC3300", "Leitora", "2500.00", "5", "10", "Fornecedor Exemplo"],
    },
    "fornecedores": {
        "label": "Fornecedores",
        "description": "Template para importação de fornecedores",
        "columns": [
            _col("nome", "Texto", True, "Nome da empresa fornecedora"),
            _col("cnpj", "Texto", True, "CNPJ no formato XX.XXX.XXX/XXXX-XX"),
            _col("contato", "Texto", False, "Nome da pessoa de contato"),
            _col("telefone", "Texto", False, "Telefone de contato"),
            _col("email", "Texto", False, "Email de contato"),
            _col("endereco", "Texto", False, "Endereço completo"),
            _col("dias_entrega_media", "Número", False, "Média de dias para entrega"),
        ],
        "sample": [
            "Fornecedor Exemplo",
            "12.345.678/0001-90",
            "João Silva",
            "(11) 99999-9999",
            "contato@exemplo.com",
            "Rua Exemplo, 123",
            "15",
        ],
    },
    "leitoras": {
        "label": "Leitoras",
        "description": "Template para importação de leitoras individuais",
        "columns": [
            _col("codigo", "Texto", True, "Código único da leitora"),
            _col("equipamento_marca", "Texto", True, "Marca do equipamento (deve existir)"),
            _col("equipamento_modelo", "Texto", True, "Modelo do equipamento (deve existir)"),
            _col("status", "Texto", False, "Disponível, Em Uso ou Em Manutenção"),
            _col("condicao", "Texto", False, "Novo ou Recondicionado"),
            _col("data_aquisicao", "Data", False, "Data de aquisição no formato DD/MM/AAAA"),
        ],
        "sample": ["LT001", "Zebra", "MC3300", "Disponível", "Novo", "01/01/2024"],
    },
    "movimentacoes": {
        "label": "Movimentações",
        "description": "Template para importação de entradas e saídas",
        "columns": [
            _col("equipamento_marca", "Texto", True, "Marca do equipamento (deve existir)"),
            _col("equipamento_modelo", "Texto", True, "Modelo do equipamento (deve existir)"),
            _col("tipo_movimento", "Texto", True, "Entrada ou Saída"),
            _col("quantidade", "Número", True, "Quantidade movimentada"),
            _col("data", "Data", False, "Data da movimentação no formato DD/MM/AAAA"),
            _col("observacoes", "Texto", False, "Observações adicionais"),
        ],
        "sample": ["Zebra", "MC3300", "Entrada", "10", "01/01/2024", "Compra inicial"],
    },
    "pedidos": {
        "label": "Pedidos",
        "description": "Template para importação de pedidos de compra",
        "columns": [
            _col("equipamento_marca", "Texto", True, "Marca do equipamento (deve existir)"),
            _col("equipamento_modelo", "Texto", True, "Modelo do equipamento (deve existir)"),
            _col("fornecedor_nome", "Texto", True, "Nome do fornecedor (deve existir)"),
            _col("quantidade", "Número", True, "Quantidade solicitada"),
            _col("data_chegada_esperada", "Data", False, "Data esperada no formato DD/MM/AAAA"),
            _col("nota_fiscal", "Texto", False, "Número da nota fiscal"),
            _col("observacoes", "Texto", False, "Observações do pedido"),
        ],
        "sample": [
            "Zebra",
            "MC3300",
            "Fornecedor Exemplo",
            "5",
            "15/01/2024",
            "NF123456",
            "Pedido urgente",
        ],
    },
}
