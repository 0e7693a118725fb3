"""Path table for the DFMS backend API."""

from __future__ import annotations

API_PREFIX = "/dfm"

# User
USER_LOGIN = f"{API_PREFIX}/user/login"
USER_LOGOUT = f"{API_PREFIX}/user/logout"
USER_INFO = f"{API_PREFIX}/user/info"

# Database
DATABASES = f"{API_PREFIX}/database"
DATABASE_TABLES = f"{DATABASES}/tables"
DATABASE_OVERVIEW_STATS = f"{DATABASES}/overview/stats"
DATABASE_OVERVIEW_TYPES = f"{DATABASES}/overview/types-distribution"
DATABASE_OVERVIEW_STORAGE = f"{DATABASES}/overview/storage-data"
RELATIONAL_DATABASES = f"{DATABASES}/relational"
TIMESERIES_DATABASES = f"{DATABASES}/timeseries"
VECTOR_DATABASES = f"{DATABASES}/vector"
VECTOR_COLLECTIONS = f"{VECTOR_DATABASES}/collections"
GEOSPATIAL_DATABASES = f"{DATABASES}/geospatial"

# Data model
DATA_MODEL_TABLES = f"{API_PREFIX}/data-model/tables"

# Cluster
CLUSTER_NODES = f"{API_PREFIX}/cluster/nodes"
CLUSTER_SHARDS = f"{API_PREFIX}/cluster/shards"

# Security
SECURITY_USERS = f"{API_PREFIX}/security/users"
SECURITY_ROLES = f"{API_PREFIX}/security/roles"
SECURITY_POLICIES = f"{API_PREFIX}/security/access-policies"
SECURITY_PERMISSIONS = f"{API_PREFIX}/security/permissions"
SECURITY_PERMISSION_GROUPS = f"{SECURITY_PERMISSIONS}/groups"

# Storage
STORAGE_VOLUMES = f"{API_PREFIX}/storage/volumes"
STORAGE_SNAPSHOTS = f"{API_PREFIX}/storage/snapshots"
STORAGE_FILES = f"{API_PREFIX}/storage/files"
STORAGE_OBJECT_URL = f"{API_PREFIX}/storage/objects/generate-url"
STORAGE_OVERVIEW_STATS = f"{API_PREFIX}/storage/overview/stats"
STORAGE_OVERVIEW_TYPES = f"{API_PREFIX}/storage/overview/types"
STORAGE_OVERVIEW_NODES = f"{API_PREFIX}/storage/overview/nodes"
STORAGE_OVERVIEW_PERFORMANCE = f"{API_PREFIX}/storage/overview/performance"
STORAGE_LIFECYCLE_LIST = f"{API_PREFIX}/storage/lifecycle/list"
STORAGE_LIFECYCLE_CREATE = f"{API_PREFIX}/storage/lifecycle/create"
STORAGE_LIFECYCLE_UPDATE = f"{API_PREFIX}/storage/lifecycle/update"
STORAGE_LIFECYCLE_DELETE = f"{API_PREFIX}/storage/lifecycle/delete"
STORAGE_LIFECYCLE_TOGGLE = f"{API_PREFIX}/storage/lifecycle/toggle"

# Monitoring
BACKUP_HISTORY = f"{API_PREFIX}/monitoring/backup/history"
BACKUP_SCHEDULES = f"{API_PREFIX}/monitoring/backup/schedules"
BACKUP_MANUAL = f"{API_PREFIX}/monitoring/backup/manual"
MONITORING_PERFORMANCE = f"{API_PREFIX}/monitoring/performance"

# System
SYSTEM_SETTINGS = f"{API_PREFIX}/system/settings"
SYSTEM_CHANGE_PASSWORD = f"{API_PREFIX}/system/change-password"
SYSTEM_LOGS = f"{API_PREFIX}/system/logs"
SYSTEM_PERFORMANCE = f"{API_PREFIX}/system/performance"
SYSTEM_PERFORMANCE_HISTORY = f"{SYSTEM_PERFORMANCE}/history"
SYSTEM_STATUS = f"{API_PREFIX}/system/status"
SYSTEM_SIDEBAR_NAV = f"{API_PREFIX}/system/sidebar-nav"
SYSTEM_OVERVIEW = f"{API_PREFIX}/system/overview"
SYSTEM_REALTIME = f"{API_PREFIX}/system/realtime"
SYSTEM_EVENTS = f"{API_PREFIX}/system/events"
SYSTEM_HEALTH_METRICS = f"{API_PREFIX}/system/health/metrics"


def detail(collection: str, item_id: str | int) -> str:
    """Return the path of one item inside ``collection``."""
    return f"{collection}/{item_id}"


def user_info(username: str) -> str:
    return detail(USER_INFO, username)


def database_tables(database_id: str | int, base: str = DATABASES) -> str:
    """Return the tables collection of one database under ``base``."""
    return f"{detail(base, database_id)}/tables"


def database_table(database_id: str | int, table_name: str) -> str:
    return detail(database_tables(database_id), table_name)


def database_query(database_id: str | int, base: str = DATABASES) -> str:
    return f"{detail(base, database_id)}/query"


def timeseries_series(database_id: str | int) -> str:
    return f"{detail(TIMESERIES_DATABASES, database_id)}/series"


def timeseries_retention_policies(database_id: str | int) -> str:
    return f"{detail(TIMESERIES_DATABASES, database_id)}/retention-policies"


def timeseries_metrics(database_id: str | int) -> str:
    return f"{detail(TIMESERIES_DATABASES, database_id)}/metrics"


def vector_collection_index(collection_id: str | int) -> str:
    return f"{detail(VECTOR_COLLECTIONS, collection_id)}/index"


def vector_collection_search(collection_id: str | int) -> str:
    return f"{detail(VECTOR_COLLECTIONS, collection_id)}/search"


def geospatial_visualization(database_id: str | int, table_name: str) -> str:
    return f"{detail(GEOSPATIAL_DATABASES, database_id)}/visualization/{table_name}"


def data_model_table(database_id: str | int, table_name: str) -> str:
    return detail(detail(DATA_MODEL_TABLES, database_id), table_name)


def data_model_structure(database_id: str | int, table_name: str) -> str:
    return f"{data_model_table(database_id, table_name)}/structure"


def data_model_indexes(database_id: str | int, table_name: str) -> str:
    return f"{data_model_table(database_id, table_name)}/indexes"


def role_permissions(role_id: str | int) -> str:
    return f"{detail(SECURITY_ROLES, role_id)}/permissions"


def role_permission_check(role_id: str | int) -> str:
    return f"{role_permissions(role_id)}/check"


# Collections the in-memory mock backend starts with, empty.
MOCK_COLLECTIONS = (
    DATABASES,
    RELATIONAL_DATABASES,
    TIMESERIES_DATABASES,
    VECTOR_COLLECTIONS,
    GEOSPATIAL_DATABASES,
    CLUSTER_NODES,
    CLUSTER_SHARDS,
    SECURITY_USERS,
    SECURITY_ROLES,
    SECURITY_POLICIES,
    STORAGE_VOLUMES,
    STORAGE_SNAPSHOTS,
    BACKUP_HISTORY,
    BACKUP_SCHEDULES,
    SYSTEM_LOGS,
)
