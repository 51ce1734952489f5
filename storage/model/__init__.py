from storage.model.config import StorageConfig
from storage.model.param import ParamKind, QueryParam

__all__ = ['StorageConfig', 'ParamKind', 'QueryParam']
