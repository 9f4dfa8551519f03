from vrdb.models.clouds import Cloud
from vrdb.models.snapshots import Snapshot
from vrdb.models.findings import DeviceFinding, TestFinding
from vrdb.models.recommendations import Recommendation

__all__ = ["Cloud", "Snapshot", "DeviceFinding", "TestFinding", "Recommendation"]
