import io
import struct

import numpy as np
import pytest


def encode_record(name, positions, orientations=None, type_tag=None, count=None):
    """Little-endian bytes of one species record (test-only encoder)."""
    positions = np.asarray(positions, dtype='<f4').reshape(-1)
    name_bytes = name if isinstance(name, bytes) else name.encode('utf-8')
    if type_tag is None:
        type_tag = 0 if orientations is None else 1
    if count is None:
        count = positions.size
    data = struct.pack('<B', len(name_bytes)) + name_bytes
    data += struct.pack('<B', type_tag) + struct.pack('<I', count)
    data += positions.tobytes()
    if orientations is not None:
        data += np.asarray(orientations, dtype='<f4').reshape(-1).tobytes()
    return data


def encode_file(records, version=2):
    return struct.pack('<I', version) + b''.join(records)


@pytest.fixture
def record_bytes():
    return encode_record


@pytest.fixture
def viz_file(tmp_path):
    """Write a list of encoded records to a viz file and return its path."""
    def _write(records, name='test.dat', version=2):
        path = tmp_path / name
        path.write_bytes(encode_file(records, version))
        return path
    return _write


@pytest.fixture
def stream_of():
    def _stream(data):
        return io.BytesIO(data)
    return _stream


@pytest.fixture
def sample_file(viz_file):
    """File with one volume and one surface species."""
    vol = encode_record('A', [[0, 0, 0], [1, 2, 3], [4, 5, 6]])
    surf = encode_record('S', [[1, 1, 1], [2, 2, 2]], orientations=[[0, 0, 1], [0, 1, 0]])
    return viz_file([vol, surf], name='sample.dat')
