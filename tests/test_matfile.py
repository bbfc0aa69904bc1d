import numpy as np
import pytest

from linsolve.matfile import (
    LinearSystem,
    MatrixFileError,
    main,
    parse_system,
    read_system,
)
from linsolve.util import SolverError

SAMPLE = (
    "# linear system\n"
    "# second header\n"
    "2 1\n"
    "# matrix A\n"
    "4.0 1.0\n"
    "1.0 3.0\n"
    "# vector b\n"
    "1.0\n"
    "2.0\n"
)


def test_parse_sample():
    system = parse_system(SAMPLE)
    assert isinstance(system, LinearSystem)
    assert system.n == 2
    assert system.m_col == 1
    assert np.array_equal(system.a, [[4.0, 1.0], [1.0, 3.0]])
    assert np.array_equal(system.b, [1.0, 2.0])


def test_headers_kept_as_read():
    system = parse_system(SAMPLE)
    assert system.headers == ("# linear system\n", "# second header\n")


def test_reached_end_only_without_trailing_text():
    assert parse_system(SAMPLE).reached_end is False
    assert parse_system(SAMPLE.rstrip("\n")).reached_end is True


def test_values_may_span_lines_and_use_exponents():
    text = "h1\nh2\n2 1\nA\n1e1 -2.5 3\n+4\nafter\nb\n.5 6E-1\n"
    system = parse_system(text)
    assert np.allclose(system.a, [[10.0, -2.5], [3.0, 4.0]])
    assert np.allclose(system.b, [0.5, 0.6])


def test_m_col_other_than_one_is_reported():
    system = parse_system(SAMPLE.replace("2 1\n", "2 3\n"))
    assert system.m_col == 3


def test_empty_text_raises():
    with pytest.raises(MatrixFileError, match="first header"):
        parse_system("")


def test_single_header_raises():
    with pytest.raises(MatrixFileError, match="second header"):
        parse_system("only one line\n")


def test_missing_dimensions_raise():
    with pytest.raises(MatrixFileError, match="dimensions"):
        parse_system("h1\nh2\nx y\n")


@pytest.mark.parametrize("dims", ["0 1", "-3 1"])
def test_non_positive_dimension_raises(dims):
    with pytest.raises(MatrixFileError, match="Invalid dimension"):
        parse_system(SAMPLE.replace("2 1", dims))


def test_dimension_over_max_size_raises():
    with pytest.raises(MatrixFileError, match="Max N=1"):
        parse_system(SAMPLE, max_size=1)
    assert parse_system(SAMPLE, max_size=2).n == 2


def test_bad_matrix_value_raises():
    with pytest.raises(MatrixFileError, match="matrix A"):
        parse_system(SAMPLE.replace("1.0 3.0", "1.0 abc"))


def test_short_vector_raises():
    with pytest.raises(MatrixFileError, match="vector b"):
        parse_system(SAMPLE.replace("2.0\n", ""))


def test_file_error_is_solver_error():
    with pytest.raises(SolverError):
        parse_system("")


def test_read_system_round_trip(tmp_path):
    path = tmp_path / "system.txt"
    path.write_text(SAMPLE)
    system = read_system(path)
    expected = parse_system(SAMPLE)
    assert np.array_equal(system.a, expected.a)
    assert np.array_equal(system.b, expected.b)


def test_read_system_missing_file(tmp_path):
    with pytest.raises(MatrixFileError):
        read_system(tmp_path / "absent.txt")


def test_main_prints_matrix_and_vector(tmp_path, capsys):
    path = tmp_path / "system.txt"
    path.write_text(SAMPLE)
    assert main(["read_mat_file", str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Skipped header lines: # second header\n\n")
    assert "4.000000 1.000000 \n1.000000 3.000000 \n" in out
    assert out.endswith("1.000000 2.000000 \n")


def test_main_usage(capsys):
    assert main(["read_mat_file"]) == 1
    assert "Usage: read_mat_file <matrix_data_file>" in capsys.readouterr().err


def test_main_reports_missing_file(tmp_path, capsys):
    assert main(["read_mat_file", str(tmp_path / "absent.txt")]) == 1
    assert "runtime error..." in capsys.readouterr().err