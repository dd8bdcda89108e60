import pytest

from vibecheck_cli.models.run_params import RunParams


def test_run_id_validation():
	assert RunParams(run_id="abc-123_x.y").run_id == "abc-123_x.y"
	with pytest.raises(ValueError):
		RunParams(run_id="../etc/passwd")


def test_interval_must_be_positive():
	with pytest.raises(ValueError):
		RunParams(interval_ms=0)


def test_tiers_restricted():
	assert RunParams(tiers="strict").tiers == "strict"
	with pytest.raises(ValueError):
		RunParams(tiers="loose")


def test_slugify():
	assert RunParams.slugify("a/b c") == "a_b_c"
	assert RunParams.slugify("///") == "default"
