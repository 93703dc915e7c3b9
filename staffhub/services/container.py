from staffhub.core.config import settings
from staffhub.repositories.data_store import DataStore
from staffhub.services.audit_service import AuditLog, AuditService
from staffhub.services.directory_service import DirectoryService
from staffhub.services.leave_service import LeaveService


store = DataStore()
audit_log = AuditLog()

audit_service = AuditService(audit_log=audit_log)
directory_service = DirectoryService(store=store)
leave_service = LeaveService(
    store=store,
    directory_service=directory_service,
    audit_service=audit_service,
    jurisdiction=settings.jurisdiction,
)
