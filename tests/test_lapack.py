import numpy as np
import pytest

from linsolve.lapack import (
    Method,
    Options,
    is_symmetric_double,
    main,
    parse_args,
    solve_lapack_cholesky,
)
from linsolve.primitives import NotPositiveDefiniteError

SPD_A = [[4.0, 1.0, 0.5], [1.0, 3.0, 0.25], [0.5, 0.25, 2.0]]
SPD_B = [1.0, 2.0, 3.0]


def _system_text(a, b):
    rows = "\n".join(" ".join(str(v) for v in row) for row in a)
    vec = "\n".join(str(v) for v in b)
    return f"# system\n# data\n{len(a)} 1\n# A\n{rows}\n# b\n{vec}\n"


@pytest.fixture
def write_system(tmp_path):
    def _write(a, b, name="system.txt"):
        path = tmp_path / name
        path.write_text(_system_text(a, b))
        return str(path)

    return _write


# parse_args


def test_parse_args_filename_only_defaults_to_gauss_jordan():
    opts = parse_args(["prog", "data.txt"])
    assert opts == Options(method=Method.GAUSS_JORDAN, filename="data.txt")


@pytest.mark.parametrize(
    "flag, method",
    [
        ("-g", Method.GAUSS_JORDAN),
        ("-c", Method.CHOLESKY_PRIMITIVE),
        ("-cl", Method.CHOLESKY_LAPACK),
    ],
)
def test_parse_args_flags(flag, method):
    opts = parse_args(["prog", flag, "data.txt"])
    assert opts.method is method
    assert opts.filename == "data.txt"
    assert opts.warnings == ()


def test_parse_args_unrecognized_flag_warns_and_uses_next_argument():
    opts = parse_args(["prog", "-cx", "data.txt"])
    assert opts.method is Method.GAUSS_JORDAN
    assert opts.filename == "data.txt"
    assert opts.warnings == (
        "Warning: Unrecognized flag '-cx'. Defaulting to Gauss-Jordan.",
    )


def test_parse_args_extra_arguments_after_flag_warn():
    opts = parse_args(["prog", "-cl", "data.txt", "more"])
    assert opts.method is Method.CHOLESKY_LAPACK
    assert opts.filename == "data.txt"
    assert opts.warnings == ("Warning: Extra command line arguments ignored.",)


def test_parse_args_arguments_after_filename_warn():
    opts = parse_args(["prog", "data.txt", "more"])
    assert opts.filename == "data.txt"
    assert opts.method is Method.GAUSS_JORDAN
    assert opts.warnings == (
        "Warning: Arguments after filename ignored. Use -g/-c/-cl flags.",
    )


def test_parse_args_lone_flag_is_taken_as_filename():
    opts = parse_args(["prog", "-c"])
    assert opts.filename == "-c"
    assert opts.method is Method.GAUSS_JORDAN


def test_parse_args_without_filename_raises():
    with pytest.raises(ValueError):
        parse_args(["prog"])


@pytest.mark.parametrize(
    "flag, label",
    [
        ("-g", "Gauss-Jordan (Float)"),
        ("-c", "Cholesky (Custom Float)"),
        ("-cl", "Cholesky (LAPACK Double)"),
    ],
)
def test_parsed_method_labels(flag, label):
    assert parse_args(["prog", flag, "data.txt"]).method.value == label


# is_symmetric_double


def test_is_symmetric_double_accepts_symmetric():
    assert is_symmetric_double(SPD_A) is True


def test_is_symmetric_double_rejects_asymmetric():
    a = [row[:] for row in SPD_A]
    a[0][2] += 1e-6
    assert is_symmetric_double(a) is False


def test_is_symmetric_double_respects_tolerance():
    a = [row[:] for row in SPD_A]
    a[0][2] += 1e-6
    assert is_symmetric_double(a, 1e-3) is True


def test_is_symmetric_double_rejects_non_square():
    with pytest.raises(ValueError):
        is_symmetric_double([[1.0, 2.0]])


# solve_lapack_cholesky


def test_solve_lapack_cholesky_satisfies_system():
    x = solve_lapack_cholesky(SPD_A, SPD_B)
    assert x.shape == (3,)
    np.testing.assert_allclose(np.array(SPD_A) @ x, SPD_B, atol=1e-12)


def test_solve_lapack_cholesky_identity_returns_b():
    x = solve_lapack_cholesky(np.eye(3), SPD_B)
    np.testing.assert_allclose(x, SPD_B)


def test_solve_lapack_cholesky_does_not_modify_inputs():
    a = np.array(SPD_A)
    b = np.array(SPD_B)
    solve_lapack_cholesky(a, b)
    np.testing.assert_array_equal(a, np.array(SPD_A))
    np.testing.assert_array_equal(b, np.array(SPD_B))


def test_solve_lapack_cholesky_not_positive_definite():
    with pytest.raises(NotPositiveDefiniteError):
        solve_lapack_cholesky([[1.0, 2.0], [2.0, 1.0]], [1.0, 1.0])


def test_solve_lapack_cholesky_shape_mismatch():
    with pytest.raises(ValueError):
        solve_lapack_cholesky(SPD_A, [1.0, 2.0])


# main


def test_main_usage(capsys):
    assert main(["prog"]) == 1
    err = capsys.readouterr().err
    assert "Usage: prog [-g | -c | -cl] <matrix_data_file>" in err
    assert "  -cl: Use LAPACK Cholesky (double)" in err


@pytest.mark.parametrize("flag", ["-g", "-c", "-cl"])
def test_main_solves_spd_system(flag, write_system, capsys):
    path = write_system(SPD_A, SPD_B)
    assert main(["prog", flag, path]) == 0
    out = capsys.readouterr().out
    assert "Verification successful (within tolerance 1.0e-09)." in out
    assert out.endswith("Freeing memory...\nDone.\n")


def test_main_reports_solver_name(write_system, capsys):
    path = write_system(SPD_A, SPD_B)
    main(["prog", "-cl", path])
    out = capsys.readouterr().out
    assert "Using solver: Cholesky (LAPACK Double)" in out
    assert "Matrix appears symmetric. Proceeding with LAPACK." in out


def test_main_lapack_rejects_asymmetric(write_system, capsys):
    path = write_system([[2.0, 1.0], [0.0, 3.0]], [1.0, 1.0])
    assert main(["prog", "-cl", path]) == 0
    captured = capsys.readouterr()
    assert "Skipping verification due to solver incompatibility or failure." in captured.out
    assert "ERROR: Matrix A is not symmetric. Cholesky method cannot be used." in captured.err


def test_main_lapack_not_positive_definite_skips_verification(write_system, capsys):
    path = write_system([[1.0, 2.0], [2.0, 1.0]], [1.0, 1.0])
    assert main(["prog", "-cl", path]) == 0
    assert "Skipping verification" in capsys.readouterr().out


def test_main_custom_cholesky_not_positive_definite_is_fatal(write_system, capsys):
    path = write_system([[1.0, 2.0], [2.0, 1.0]], [1.0, 1.0])
    assert main(["prog", "-c", path]) == 1
    assert "Matrix is not positive-definite" in capsys.readouterr().err


def test_main_gauss_jordan_singular_is_fatal(write_system, capsys):
    path = write_system([[1.0, 2.0], [2.0, 4.0]], [1.0, 1.0])
    assert main(["prog", "-g", path]) == 1
    assert "singular" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main(["prog", str(tmp_path / "absent.txt")]) == 1
    assert "runtime error..." in capsys.readouterr().err


def test_main_warns_on_unrecognized_flag(write_system, capsys):
    path = write_system(SPD_A, SPD_B)
    assert main(["prog", "-gx", path]) == 0
    captured = capsys.readouterr()
    assert "Warning: Unrecognized flag '-gx'. Defaulting to Gauss-Jordan." in captured.err
    assert "Using solver: Gauss-Jordan (Float)" in captured.out