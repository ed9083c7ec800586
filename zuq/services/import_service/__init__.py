"""Import service package: parse, validate, approve and persist bulk imports."""

from .constants import (
    DATA_TYPE_LABELS,
    DATA_TYPES,
    IMPORT_STATUS_LABELS,
    MAX_ROWS,
    SUPPORTED_EXTENSIONS,
    TEMPLATE_CONFIGS,
)
from .converters import (
    br_date_to_iso,
    coerce_int,
    format_br_datetime,
    is_valid_br_date,
    iso_to_br_date,
    parse_number,
)
from .errors import (
    ImportParseError,
    ImportServiceError,
    MissingReferenceError,
    NotAuthenticatedError,
    TemplateNotFoundError,
    UnsupportedDataTypeError,
)
from .parsers import parse_csv, parse_import_file, parse_xlsx
from .persister import save_import_data
from .records import (
    ImportRecord,
    ImportSummary,
    ValidationMetadata,
    approve_all_duplicates,
    importable_records,
    reject_all_duplicates,
    set_approval,
    summarize,
)
from .rules import RULES, ImportRules
from .templates import (
    build_template_workbook,
    generate_import_report,
    get_template_guide,
    import_report_filename,
    template_filename,
)
from .validator import get_rules, validate_records

__all__ = [
    # Constants
    "DATA_TYPES",
    "DATA_TYPE_LABELS",
    "IMPORT_STATUS_LABELS",
    "MAX_ROWS",
    "SUPPORTED_EXTENSIONS",
    "TEMPLATE_CONFIGS",
    # Errors
    "ImportServiceError",
    "ImportParseError",
    "MissingReferenceError",
    "NotAuthenticatedError",
    "TemplateNotFoundError",
    "UnsupportedDataTypeError",
    # Converters
    "br_date_to_iso",
    "coerce_int",
    "format_br_datetime",
    "is_valid_br_date",
    "iso_to_br_date",
    "parse_number",
    # Parsers
    "parse_csv",
    "parse_xlsx",
    "parse_import_file",
    # Records and approval
    "ImportRecord",
    "ImportSummary",
    "ValidationMetadata",
    "approve_all_duplicates",
    "reject_all_duplicates",
    "set_approval",
    "importable_records",
    "summarize",
    # Validation
    "RULES",
    "ImportRules",
    "get_rules",
    "validate_records",
    # Persistence
    "save_import_data",
    # Templates and reports
    "build_template_workbook",
    "generate_import_report",
    "get_template_guide",
    "import_report_filename",
    "template_filename",
]
