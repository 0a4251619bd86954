"""
Least-bytes partition assignment for keyless stream messages.
"""

from typing import Dict, Iterable


class LeastBytesPartitioner:
    """
    Sends each message to the partition that has received the fewest bytes
    from this process so far. Ties go to the lowest partition id.

    Bytes are counted when a partition is picked, not when the broker
    acknowledges, so concurrent sends spread out immediately.
    Messages carry no key: ordering per client is not preserved.
    """

    def __init__(self):
        self._written: Dict[int, int] = {}

    def pick(self, partitions: Iterable[int], size: int) -> int:
        """
        Choose a partition for a message and account for its size.

        Args:
            partitions: Partition ids of the topic
            size: Message size in bytes

        Returns:
            The chosen partition id
        """
        candidates = sorted(partitions)
        if not candidates:
            raise ValueError("topic has no partitions")

        partition = min(candidates, key=lambda p: self._written.get(p, 0))
        self._written[partition] = self._written.get(partition, 0) + size
        return partition

    def bytes_written(self, partition: int) -> int:
        return self._written.get(partition, 0)
