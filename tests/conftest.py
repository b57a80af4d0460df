import pandas as pd
import pytest

from qld_atar.scaling_params import ScalingParameterStore

# a=0.1, k=-5 puts the curve midpoint at raw 50 (scaled 50.0)
GENERAL_ROWS = [
    ('Maths A', 'Maths A', 'General', '0 - 100', '0.1', '-5'),
    ('Science B', 'Science B', 'General', '0 - 100', '0.05', '-2'),
    ('History C', 'History C', 'General', '0 - 100', '0.1', '-5'),
    ('Art D', 'Art D', 'General', '0 - 100', '0.1', '-5'),
    ('Music E', 'Music E', 'General', '0 - 100', '0.1', '-5'),
    ('Drama F', 'Drama F', 'General', '0 - 100', '0.1', '-5'),
    ('Film Television and New Media', 'Film, TV & New Media', 'General', '0 - 100', '0.1', '-5'),
    ('Latin', 'Latin', 'General', '0 - 100', 'null', 'null'),
    ('Tourism', 'Tourism', 'Applied', 'A - E', 'null', 'null'),
    ('Cert III Business', 'Cert III Business', 'VET', 'Pass', 'null', 'null'),
]

APPLIED_VET_ROWS = [
    ('Tourism', 'A', '40'),
    ('Tourism', 'B', '20'),
    ('Tourism', 'C', '10'),
    ('Tourism', 'D', '5'),
    ('Tourism', 'E', '1'),
    ('Cert III Business', 'Pass', '38'),
]


def make_frames(general_rows=GENERAL_ROWS, applied_vet_rows=APPLIED_VET_ROWS):
    general = pd.DataFrame(general_rows,
                           columns=['Subject_name', 'Subject_display', 'Type', 'Validation', 'a', 'k'])
    applied = pd.DataFrame(applied_vet_rows, columns=['Subject', 'Result', 'Scaled Score'])
    return general, applied


@pytest.fixture
def store():
    return ScalingParameterStore.from_frames(*make_frames())


@pytest.fixture(scope='session')
def default_store():
    return ScalingParameterStore.default()
