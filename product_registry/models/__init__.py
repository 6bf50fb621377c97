# Importing this package registers every table on Base.metadata.
from product_registry.models.product import ProductRecord
from product_registry.models.product_update import ProductUpdateRecord
from product_registry.models.registry_config import RegistryConfig
from product_registry.models.fee_ledger import FeeLedgerEntry
from product_registry.models.audit_log import AuditLog
