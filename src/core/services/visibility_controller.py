import logging
from dataclasses import replace
from typing import Dict, List, Sequence

from core.models.channel import CHANNEL_CATALOG, ChannelDefinition, ChannelSeries

logger = logging.getLogger(__name__)


def _key(label: str) -> str:
    return label.casefold()


class VisibilityController:
    """
    Hidden/shown state of the toggle-able channel groups of a chart session.

    State is keyed by channel label (case-insensitive) and only changes through
    toggle_group / reset, so rebuilding datasets never resets it.
    Every grouped channel starts hidden; ungrouped channels are always shown.
    """

    def __init__(self, catalog: Sequence[ChannelDefinition] = CHANNEL_CATALOG):
        self._members: Dict[str, List[str]] = {}
        for definition in catalog:
            if definition.group_id is not None:
                self._members.setdefault(definition.group_id, []).append(_key(definition.label))
        self._hidden: Dict[str, bool] = {}
        self.reset()

    def reset(self):
        """Back to the initial state: every grouped channel hidden."""
        self._hidden = {label: True for labels in self._members.values() for label in labels}

    def toggle_group(self, group_id: str) -> bool:
        """
        Flip the hidden flag of every channel in the group.
        Returns False (and changes nothing) for an unknown group.
        """
        labels = self._members.get(group_id)
        if labels is None:
            logger.debug(f"Ignoring toggle of unknown channel group {group_id!r}")
            return False
        for label in labels:
            self._hidden[label] = not self._hidden[label]
        logger.info(f"Toggled channel group {group_id} (hidden={self.is_group_hidden(group_id)})")
        return True

    def is_group_hidden(self, group_id: str) -> bool:
        """True when every channel of the group is hidden."""
        labels = self._members.get(group_id, [])
        return bool(labels) and all(self._hidden[label] for label in labels)

    def groups(self) -> Dict[str, bool]:
        return {group_id: self.is_group_hidden(group_id) for group_id in self._members}

    def is_hidden(self, channel: ChannelSeries) -> bool:
        if channel.group_id is None:
            return False
        hidden = self._hidden.get(_key(channel.label))
        if hidden is None:
            # Label not in the catalog this controller was built from
            return self.is_group_hidden(channel.group_id)
        return hidden

    def apply_visibility(self, channels: Sequence[ChannelSeries]) -> List[ChannelSeries]:
        """Copies of the channels with their hidden flag set from the current state."""
        return [replace(channel, hidden=self.is_hidden(channel)) for channel in channels]


# Global instance
visibility_controller = VisibilityController()
