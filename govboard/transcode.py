"""
Field-name transcoder: snake_case (backend) <-> camelCase (frontend).

Keys are converted recursively through dicts and lists. Values are never
inspected. Irregular keys live in two static override tables, one per
direction, so the regular rule stays a pure function.

Known limitation: acronym keys outside the tables do not map onto the
backend's spelling. Without its table entry "noPKSPO" would become
"no_p_k_s_p_o", not "no_pks_po".
"""
import re
from typing import Any, Callable, Dict

# Backend key -> frontend key
SNAKE_TO_CAMEL: Dict[str, str] = {
    "no_pks_po": "noPKSPO",
    "tanggal_pks_po": "tanggalPKSPO",
    "tanggal_bapp": "tanggalBAPP",
    "termin_pembayaran": "terminPembayaran",
    "uploaded_at": "uploadedAt",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "project_id": "projectId",
    "vendor_id": "vendorId",
    "payment_date": "paymentDate",
    "budget_type": "budgetType",
    "opex_cabang": "opexCabang",
    "opex_pusat": "opexPusat",
}

# Frontend key -> backend key (superset of the reverse of SNAKE_TO_CAMEL)
CAMEL_TO_SNAKE: Dict[str, str] = {
    "kodeProject": "kode_project",
    "projectName": "project_name",
    "projectType": "project_type",
    "divisiInisiasi": "divisi_inisiasi",
    "grupTerlibat": "grup_terlibat",
    "namaVendor": "nama_vendor",
    "noPKSPO": "no_pks_po",
    "tanggalPKSPO": "tanggal_pks_po",
    "tanggalBAPP": "tanggal_bapp",
    "tanggalBerakhir": "tanggal_berakhir",
    "terminPembayaran": "termin_pembayaran",
    "uploadedAt": "uploaded_at",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "projectId": "project_id",
    "vendorId": "vendor_id",
    "paymentDate": "payment_date",
    "budgetType": "budget_type",
    "opexCabang": "opex_cabang",
    "opexPusat": "opex_pusat",
    # Vendor field variations
    "vendorName": "vendor_name",
    "vendor": "vendor",
    # PKS/PO number variations
    "pksPoNumber": "pks_po_number",
    "poNumber": "po_number",
    "contractNumber": "contract_number",
    # Date field variations
    "pksDate": "pks_date",
    "pksPoDate": "pks_po_date",
    "contractDate": "contract_date",
    "startDate": "start_date",
    "bappDate": "bapp_date",
    "handoverDate": "handover_date",
    "deliveryDate": "delivery_date",
    "endDate": "end_date",
    "finishDate": "finish_date",
    "completionDate": "completion_date",
    # Payment term variations
    "paymentTerms": "payment_terms",
    "payments": "payments",
    "terms": "terms",
    "projectPayments": "project_payments",
    "projectTerms": "project_terms",
}

_UNDERSCORE_LOWER = re.compile(r"_([a-z])")
_UPPER = re.compile(r"[A-Z]")


def key_to_camel(key: str) -> str:
    """Convert one snake_case key, honouring the override table."""
    if key in SNAKE_TO_CAMEL:
        return SNAKE_TO_CAMEL[key]
    return _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), key)


def key_to_snake(key: str) -> str:
    """Convert one camelCase key, honouring the override table."""
    if key in CAMEL_TO_SNAKE:
        return CAMEL_TO_SNAKE[key]
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), key)


def _walk(value: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(value, dict):
        return {
            (convert(k) if isinstance(k, str) else k): _walk(v, convert)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_walk(item, convert) for item in value]
    if isinstance(value, tuple):
        return tuple(_walk(item, convert) for item in value)
    return value


def to_camel(value: Any) -> Any:
    """Return a copy of ``value`` with every mapping key in camelCase."""
    return _walk(value, key_to_camel)


def to_snake(value: Any) -> Any:
    """Return a copy of ``value`` with every mapping key in snake_case."""
    return _walk(value, key_to_snake)
