"""Resource APIs grouping DFMS endpoints by console area.

Each method issues one request through a ``DfmsClient`` and returns the
normalized ``ApiEnvelope``; failures raise ``ApiRequestError``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Literal

from packages.dfms_shared.envelope import ApiEnvelope

from . import endpoints
from .types import PaginationParams, to_query

if TYPE_CHECKING:
    from .client import DfmsClient

Params = PaginationParams | Mapping[str, Any] | None
Payload = Mapping[str, Any]

DEFAULT_HEALTH_METRICS = ("cpu", "memory", "disk", "network")


class _ResourceApi:
    def __init__(self, client: DfmsClient) -> None:
        self._client = client

    def _list(self, path: str, params: Params = None) -> ApiEnvelope:
        query = to_query(params)
        if query is None:
            return self._client.get(path)
        return self._client.get(path, params=query)

    def _get(self, path: str, item_id: str | int) -> ApiEnvelope:
        return self._client.get(endpoints.detail(path, item_id))

    def _create(self, path: str, data: Payload) -> ApiEnvelope:
        return self._client.post(path, json=dict(data))

    def _update(self, path: str, item_id: str | int, data: Payload) -> ApiEnvelope:
        return self._client.put(endpoints.detail(path, item_id), json=dict(data))

    def _delete(self, path: str, item_id: str | int) -> ApiEnvelope:
        return self._client.delete(endpoints.detail(path, item_id))

    def _action(self, path: str, data: Payload | None = None) -> ApiEnvelope:
        """POST a command body, sending ``{}`` when there is none."""
        return self._client.post(path, json=dict(data or {}))


class DatabaseApi(_ResourceApi):
    """Databases, their tables and ad-hoc queries."""

    def list(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.DATABASES, params)

    def get(self, database_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.DATABASES, database_id)

    def create(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.DATABASES, data)

    def update(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.DATABASES, database_id, data)

    def delete(self, database_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.DATABASES, database_id)

    def list_tables(self, params: Params = None) -> ApiEnvelope:
        """Return tables across every database."""
        return self._list(endpoints.DATABASE_TABLES, params)

    def get_table(self, database_id: str | int, table_name: str) -> ApiEnvelope:
        return self._client.get(endpoints.database_table(database_id, table_name))

    def create_table(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.database_tables(database_id), data)

    def update_table(
        self, database_id: str | int, table_name: str, data: Payload
    ) -> ApiEnvelope:
        return self._update(endpoints.database_tables(database_id), table_name, data)

    def delete_table(self, database_id: str | int, table_name: str) -> ApiEnvelope:
        return self._delete(endpoints.database_tables(database_id), table_name)

    def execute_query(self, database_id: str | int, query: str) -> ApiEnvelope:
        """Run one query statement against a database."""
        return self._client.post(endpoints.database_query(database_id), json={"query": query})

    def list_relational(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.RELATIONAL_DATABASES, params)

    def list_timeseries(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.TIMESERIES_DATABASES, params)

    def list_vector(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.VECTOR_DATABASES, params)

    def list_geospatial(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.GEOSPATIAL_DATABASES, params)

    def overview_stats(self) -> ApiEnvelope:
        return self._action(endpoints.DATABASE_OVERVIEW_STATS)

    def types_distribution(self) -> ApiEnvelope:
        return self._action(endpoints.DATABASE_OVERVIEW_TYPES)

    def storage_data(self) -> ApiEnvelope:
        return self._action(endpoints.DATABASE_OVERVIEW_STORAGE)


class RelationalApi(_ResourceApi):
    """Relational databases, their tables and SQL queries."""

    def list(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.RELATIONAL_DATABASES, params)

    def get(self, database_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.RELATIONAL_DATABASES, database_id)

    def create(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.RELATIONAL_DATABASES, data)

    def execute_query(self, database_id: str | int, query: str) -> ApiEnvelope:
        path = endpoints.database_query(database_id, endpoints.RELATIONAL_DATABASES)
        return self._client.post(path, json={"query": query})

    def list_tables(self, database_id: str | int, params: Params = None) -> ApiEnvelope:
        path = endpoints.database_tables(database_id, endpoints.RELATIONAL_DATABASES)
        return self._list(path, params)

    def create_table(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        path = endpoints.database_tables(database_id, endpoints.RELATIONAL_DATABASES)
        return self._create(path, data)


class TimeseriesApi(_ResourceApi):
    """Time-series databases, series, retention policies and metrics."""

    def list(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.TIMESERIES_DATABASES, params)

    def get(self, database_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.TIMESERIES_DATABASES, database_id)

    def create(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.TIMESERIES_DATABASES, data)

    def list_series(self, database_id: str | int, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.timeseries_series(database_id), params)

    def create_series(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.timeseries_series(database_id), data)

    def delete_series(self, database_id: str | int, series_name: str) -> ApiEnvelope:
        return self._delete(endpoints.timeseries_series(database_id), series_name)

    def execute_query(self, database_id: str | int, query: str) -> ApiEnvelope:
        path = endpoints.database_query(database_id, endpoints.TIMESERIES_DATABASES)
        return self._client.post(path, json={"query": query})

    def list_retention_policies(self, database_id: str | int) -> ApiEnvelope:
        return self._client.get(endpoints.timeseries_retention_policies(database_id))

    def create_retention_policy(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.timeseries_retention_policies(database_id), data)

    def get_metrics(self, database_id: str | int, time_range: str = "24h") -> ApiEnvelope:
        return self._list(endpoints.timeseries_metrics(database_id), {"timeRange": time_range})


class VectorApi(_ResourceApi):
    """Vector collections, their index configuration and similarity search."""

    def list_collections(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.VECTOR_COLLECTIONS, params)

    def get_collection(self, collection_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.VECTOR_COLLECTIONS, collection_id)

    def create_collection(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.VECTOR_COLLECTIONS, data)

    def update_collection(self, collection_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.VECTOR_COLLECTIONS, collection_id, data)

    def delete_collection(self, collection_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.VECTOR_COLLECTIONS, collection_id)

    def get_index_config(self, collection_id: str | int) -> ApiEnvelope:
        return self._client.get(endpoints.vector_collection_index(collection_id))

    def update_index_config(self, collection_id: str | int, data: Payload) -> ApiEnvelope:
        return self._client.put(
            endpoints.vector_collection_index(collection_id), json=dict(data)
        )

    def search(self, collection_id: str | int, data: Payload) -> ApiEnvelope:
        """Run one similarity search; ``data`` carries the query vector and limits."""
        return self._client.post(
            endpoints.vector_collection_search(collection_id), json=dict(data)
        )


class GeospatialApi(_ResourceApi):
    """Geospatial databases, tables, queries and map data."""

    def list(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.GEOSPATIAL_DATABASES, params)

    def get(self, database_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.GEOSPATIAL_DATABASES, database_id)

    def create(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.GEOSPATIAL_DATABASES, data)

    def list_tables(self, database_id: str | int, params: Params = None) -> ApiEnvelope:
        path = endpoints.database_tables(database_id, endpoints.GEOSPATIAL_DATABASES)
        return self._list(path, params)

    def create_table(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        path = endpoints.database_tables(database_id, endpoints.GEOSPATIAL_DATABASES)
        return self._create(path, data)

    def execute_query(self, database_id: str | int, query: str) -> ApiEnvelope:
        path = endpoints.database_query(database_id, endpoints.GEOSPATIAL_DATABASES)
        return self._client.post(path, json={"query": query})

    def get_visualization(self, database_id: str | int, table_name: str) -> ApiEnvelope:
        return self._client.get(endpoints.geospatial_visualization(database_id, table_name))


class DataModelApi(_ResourceApi):
    """Table structure and index management."""

    def get_structure(self, database_id: str | int, table_name: str) -> ApiEnvelope:
        return self._client.get(endpoints.data_model_structure(database_id, table_name))

    def create_table(self, database_id: str | int, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.detail(endpoints.DATA_MODEL_TABLES, database_id), data)

    def alter_table(self, database_id: str | int, table_name: str, data: Payload) -> ApiEnvelope:
        return self._client.put(
            endpoints.data_model_table(database_id, table_name), json=dict(data)
        )

    def drop_table(self, database_id: str | int, table_name: str) -> ApiEnvelope:
        return self._client.delete(endpoints.data_model_table(database_id, table_name))

    def list_indexes(self, database_id: str | int, table_name: str) -> ApiEnvelope:
        return self._client.get(endpoints.data_model_indexes(database_id, table_name))

    def create_index(self, database_id: str | int, table_name: str, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.data_model_indexes(database_id, table_name), data)

    def drop_index(self, database_id: str | int, table_name: str, index_name: str) -> ApiEnvelope:
        return self._delete(endpoints.data_model_indexes(database_id, table_name), index_name)


class ClusterApi(_ResourceApi):
    """Cluster nodes and shards."""

    def list_nodes(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.CLUSTER_NODES, params)

    def get_node(self, node_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.CLUSTER_NODES, node_id)

    def create_node(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.CLUSTER_NODES, data)

    def update_node(self, node_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.CLUSTER_NODES, node_id, data)

    def delete_node(self, node_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.CLUSTER_NODES, node_id)

    def list_shards(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.CLUSTER_SHARDS, params)

    def get_shard(self, shard_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.CLUSTER_SHARDS, shard_id)


class SecurityApi(_ResourceApi):
    """Users, roles, access policies and role permissions."""

    def list_users(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.SECURITY_USERS, params)

    def get_user(self, user_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.SECURITY_USERS, user_id)

    def create_user(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.SECURITY_USERS, data)

    def update_user(self, user_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.SECURITY_USERS, user_id, data)

    def delete_user(self, user_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.SECURITY_USERS, user_id)

    def list_roles(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.SECURITY_ROLES, params)

    def get_role(self, role_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.SECURITY_ROLES, role_id)

    def create_role(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.SECURITY_ROLES, data)

    def update_role(self, role_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.SECURITY_ROLES, role_id, data)

    def delete_role(self, role_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.SECURITY_ROLES, role_id)

    def list_policies(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.SECURITY_POLICIES, params)

    def get_policy(self, policy_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.SECURITY_POLICIES, policy_id)

    def create_policy(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.SECURITY_POLICIES, data)

    def update_policy(self, policy_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.SECURITY_POLICIES, policy_id, data)

    def delete_policy(self, policy_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.SECURITY_POLICIES, policy_id)

    def get_role_permissions(self, role_id: str | int) -> ApiEnvelope:
        return self._client.get(endpoints.role_permissions(role_id))

    def update_role_permissions(self, role_id: str | int, data: Payload) -> ApiEnvelope:
        return self._client.put(endpoints.role_permissions(role_id), json=dict(data))

    def check_role_permission(self, role_id: str | int, permission_code: str) -> ApiEnvelope:
        """Ask whether ``role_id`` holds ``permission_code``."""
        return self._client.get(
            endpoints.role_permission_check(role_id),
            params={"permissionCode": permission_code},
        )

    def list_permissions(self) -> ApiEnvelope:
        return self._client.get(endpoints.SECURITY_PERMISSIONS)

    def list_permission_groups(self) -> ApiEnvelope:
        return self._client.get(endpoints.SECURITY_PERMISSION_GROUPS)


class StorageApi(_ResourceApi):
    """Volumes, snapshots, files, object links, overview and lifecycle policies."""

    def list_volumes(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.STORAGE_VOLUMES, params)

    def get_volume(self, volume_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.STORAGE_VOLUMES, volume_id)

    def create_volume(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.STORAGE_VOLUMES, data)

    def update_volume(self, volume_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.STORAGE_VOLUMES, volume_id, data)

    def delete_volume(self, volume_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.STORAGE_VOLUMES, volume_id)

    def list_snapshots(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.STORAGE_SNAPSHOTS, params)

    def get_snapshot(self, snapshot_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.STORAGE_SNAPSHOTS, snapshot_id)

    def create_snapshot(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.STORAGE_SNAPSHOTS, data)

    def delete_snapshot(self, snapshot_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.STORAGE_SNAPSHOTS, snapshot_id)

    def list_files(self, path: str = "/") -> ApiEnvelope:
        return self._client.get(endpoints.STORAGE_FILES, params={"path": path})

    def delete_file(self, path: str) -> ApiEnvelope:
        return self._client.delete(endpoints.STORAGE_FILES, params={"path": path})

    def generate_object_url(
        self,
        bucket_name: str,
        key: str,
        *,
        expires_in: int = 3600,
        access: Literal["public", "private"] = "private",
    ) -> ApiEnvelope:
        """Request a time-limited access link for one stored object."""
        return self._action(
            endpoints.STORAGE_OBJECT_URL,
            {"bucketName": bucket_name, "key": key, "expiresIn": expires_in, "access": access},
        )

    def overview_stats(self) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_OVERVIEW_STATS)

    def types_distribution(self) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_OVERVIEW_TYPES)

    def overview_nodes(self) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_OVERVIEW_NODES)

    def overview_performance(self) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_OVERVIEW_PERFORMANCE)

    def list_lifecycle_policies(self) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_LIFECYCLE_LIST)

    def create_lifecycle_policy(self, data: Payload) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_LIFECYCLE_CREATE, data)

    def update_lifecycle_policy(self, policy_id: str, updates: Payload) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_LIFECYCLE_UPDATE, {"id": policy_id, **updates})

    def delete_lifecycle_policy(self, policy_id: str) -> ApiEnvelope:
        return self._action(endpoints.STORAGE_LIFECYCLE_DELETE, {"id": policy_id})

    def toggle_lifecycle_policy(self, policy_id: str, enabled: bool) -> ApiEnvelope:
        return self._action(
            endpoints.STORAGE_LIFECYCLE_TOGGLE, {"id": policy_id, "enabled": enabled}
        )


class MonitoringApi(_ResourceApi):
    """Backup history, backup schedules and performance data."""

    def list_backup_history(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.BACKUP_HISTORY, params)

    def get_backup(self, backup_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.BACKUP_HISTORY, backup_id)

    def list_schedules(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.BACKUP_SCHEDULES, params)

    def get_schedule(self, schedule_id: str | int) -> ApiEnvelope:
        return self._get(endpoints.BACKUP_SCHEDULES, schedule_id)

    def create_schedule(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.BACKUP_SCHEDULES, data)

    def update_schedule(self, schedule_id: str | int, data: Payload) -> ApiEnvelope:
        return self._update(endpoints.BACKUP_SCHEDULES, schedule_id, data)

    def delete_schedule(self, schedule_id: str | int) -> ApiEnvelope:
        return self._delete(endpoints.BACKUP_SCHEDULES, schedule_id)

    def start_manual_backup(self, data: Payload) -> ApiEnvelope:
        return self._create(endpoints.BACKUP_MANUAL, data)

    def get_performance(self, time_range: str | None = None) -> ApiEnvelope:
        return self._list(endpoints.MONITORING_PERFORMANCE, {"timeRange": time_range})


class SystemApi(_ResourceApi):
    """System settings, logs, performance, status, events and health."""

    def get_settings(self) -> ApiEnvelope:
        return self._client.get(endpoints.SYSTEM_SETTINGS)

    def update_settings(self, data: Payload) -> ApiEnvelope:
        return self._client.put(endpoints.SYSTEM_SETTINGS, json=dict(data))

    def change_admin_password(
        self, current_password: str, new_password: str, confirm_password: str
    ) -> ApiEnvelope:
        return self._client.post(
            endpoints.SYSTEM_CHANGE_PASSWORD,
            json={
                "currentPassword": current_password,
                "newPassword": new_password,
                "confirmPassword": confirm_password,
            },
        )

    def list_logs(self, params: Params = None) -> ApiEnvelope:
        return self._list(endpoints.SYSTEM_LOGS, params)

    def get_performance(self, time_range: str | None = None) -> ApiEnvelope:
        return self._list(endpoints.SYSTEM_PERFORMANCE, {"timeRange": time_range})

    def get_status(self) -> ApiEnvelope:
        return self._client.get(endpoints.SYSTEM_STATUS)

    def get_sidebar_nav(self) -> ApiEnvelope:
        return self._client.get(endpoints.SYSTEM_SIDEBAR_NAV)

    def get_overview(self) -> ApiEnvelope:
        return self._action(endpoints.SYSTEM_OVERVIEW)

    def get_realtime_status(self) -> ApiEnvelope:
        return self._action(endpoints.SYSTEM_REALTIME)

    def get_performance_history(self, time_range: str = "24h") -> ApiEnvelope:
        return self._action(endpoints.SYSTEM_PERFORMANCE_HISTORY, {"timeRange": time_range})

    def get_events(
        self,
        *,
        level: Literal["info", "warning", "error"] = "info",
        time_range: str = "24h",
        limit: int = 100,
    ) -> ApiEnvelope:
        return self._action(
            endpoints.SYSTEM_EVENTS,
            {"level": level, "timeRange": time_range, "limit": limit},
        )

    def get_health_metrics(
        self,
        *,
        time_range: str = "30d",
        interval: str = "1d",
        metrics: Sequence[str] = DEFAULT_HEALTH_METRICS,
    ) -> ApiEnvelope:
        """Return health samples for ``metrics`` bucketed by ``interval``."""
        return self._action(
            endpoints.SYSTEM_HEALTH_METRICS,
            {"timeRange": time_range, "interval": interval, "metrics": list(metrics)},
        )
