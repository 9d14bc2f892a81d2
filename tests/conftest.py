import pytest

from freightrail.inputs import FreightSpec, Placement, Preferences
from freightrail.models import CarType, Connection, Operator, Station
from freightrail.network import RailNetwork


@pytest.fixture(scope="session")
def network():
    """The bundled North American network."""
    return RailNetwork.default()


@pytest.fixture
def diamond():
    """
    A ──BNSF 100── B ──UP 100── D
    A ──BNSF 150── C ──BNSF 150── D
    A ─────────CSX 400────────── D
    """
    stations = [
        Station(code, code, 40.0 + i, -90.0 - i, "XX", "Multiple")
        for i, code in enumerate("ABCD")
    ]
    connections = [
        Connection("A", "B", 100, Operator.BNSF, 1, ("S1",)),
        Connection("B", "D", 100, Operator.UP, 1, ("S2",)),
        Connection("A", "C", 150, Operator.BNSF, 1, ("S1",)),
        Connection("C", "D", 150, Operator.BNSF, 1, ("S3",)),
        Connection("A", "D", 400, Operator.CSX, 1, ("S1", "S4")),
    ]
    return RailNetwork(stations, connections)


@pytest.fixture
def default_prefs():
    return Preferences(weight_distance=1.0, weight_single_operator=0.5, weight_curves=0.3, max_transfers=5)


@pytest.fixture
def boxcar():
    return CarType("test_boxcar", "Boxcar", 60, 9.5, 15, 220_000, 4)


@pytest.fixture
def freight():
    return FreightSpec(length=40, width=8, height=10, weight=50_000)


@pytest.fixture
def centred():
    return Placement(x=0, y=0)
