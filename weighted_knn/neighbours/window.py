# weighted_knn/neighbours/window.py
import logging

from ..data.dataset import Dataset

logger = logging.getLogger(__name__)


class TrainingWindow:
    """FIFO cap on a training set; ``capacity`` 0 means unbounded."""

    def __init__(self, data: Dataset, capacity: int = 0) -> None:
        self.data = data
        self.capacity = capacity

    @property
    def size(self) -> int:
        return self.data.num_instances

    def add(self, x, y: float, weight: float = 1.0) -> int:
        """Append an instance and return how many old ones were evicted."""
        self.data.append(x, y, weight)
        return self.shrink_to(self.capacity)

    def evict_oldest(self, count: int = 1) -> int:
        count = min(count, self.size)
        if count > 0:
            self.data.delete_first(count)
            logger.debug("Evicted %d instance(s) from training window", count)
        return count

    def shrink_to(self, capacity: int) -> int:
        if capacity <= 0 or self.size <= capacity:
            return 0
        return self.evict_oldest(self.size - capacity)
