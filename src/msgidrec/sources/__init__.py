"""Declaration sources: collaborator protocols, snapshot, aggregation.

Main Components
---------------
- ProjectSources / LiveSessionProvider: collaborator protocols
- ProjectSnapshot: in-memory implementation, loadable from JSON
- SchedulerSessions: open scheduler sessions
- collect_declarations: gathers included declarations for a scan
"""

from msgidrec.sources.aggregator import (
    Aggregation,
    collect_declarations,
    collect_live_ids,
    collect_table_values,
    collect_telemetry_declarations,
)
from msgidrec.sources.live import SchedulerSession, SchedulerSessions, iter_message_ids
from msgidrec.sources.project import (
    DataField,
    ProjectFileError,
    ProjectSnapshot,
    ProjectTable,
    load_project,
)
from msgidrec.sources.protocols import (
    LiveSessionProvider,
    MacroResolver,
    ProjectSources,
    ProjectStore,
    ReservationSource,
    SchedulerSessionView,
    TypeCatalog,
)

__all__ = [
    "Aggregation",
    "collect_declarations",
    "collect_live_ids",
    "collect_table_values",
    "collect_telemetry_declarations",
    "SchedulerSession",
    "SchedulerSessions",
    "iter_message_ids",
    "DataField",
    "ProjectFileError",
    "ProjectSnapshot",
    "ProjectTable",
    "load_project",
    "LiveSessionProvider",
    "MacroResolver",
    "ProjectSources",
    "ProjectStore",
    "ReservationSource",
    "SchedulerSessionView",
    "TypeCatalog",
]
