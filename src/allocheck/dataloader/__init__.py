from allocheck.dataloader.config_loader import ConfigLoader
from allocheck.dataloader.dataset_loader import DatasetLoader
from allocheck.dataloader.rules_loader import RulesLoader
from allocheck.dataloader.types import LoadResult

__all__ = ["ConfigLoader", "DatasetLoader", "RulesLoader", "LoadResult"]
