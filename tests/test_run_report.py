import logging
from pathlib import Path

import pytest

from grievance_map.aggregation import aggregate_blocks
from grievance_map.data_loading import load_grievances
from grievance_map.geo_utils import extract_block_features, load_blocks_geojson
from grievance_map.run_report import main

DATA_DIR = Path(__file__).parent.parent / "data"
COMPLAINTS = DATA_DIR / "complaints.csv"
BLOCKS = DATA_DIR / "dhenkanal_blocks.geojson"


def test_sample_data_aggregates():
    records = load_grievances(COMPLAINTS)
    features = extract_block_features(load_blocks_geojson(BLOCKS))

    stats = aggregate_blocks(records, features)
    by_key = {s.key: s for s in stats}

    assert len(records) == 24
    assert len(features) == 8
    assert stats[0].label == "Kamakhyanagar"
    assert stats[0].total == 7
    assert by_key["dhenkanal sadar"].label == "Dhenkanal Sadar"
    assert by_key["dhenkanal sadar"].total == 5
    assert by_key["hindol"].total == 0
    assert by_key["kamakhya nagar"].total == 1
    assert sum(s.total for s in stats) == 23


def test_report_succeeds(caplog):
    caplog.set_level(logging.INFO)

    exit_code = main(['--complaints', str(COMPLAINTS), '--blocks', str(BLOCKS), '--block', ' Hindol '])

    assert exit_code == 0
    assert "Hindol Block – Complaint Details" in caplog.text
    assert "No complaints recorded for this block yet." in caplog.text
    assert "have no boundary polygon" in caplog.text


def test_report_unknown_block_is_not_an_error(caplog):
    caplog.set_level(logging.INFO)

    exit_code = main(['--complaints', str(COMPLAINTS), '--blocks', str(BLOCKS), '--block', 'Atlantis'])

    assert exit_code == 0
    assert "No detail available for block 'atlantis'" in caplog.text


def test_report_missing_file(tmp_path):
    assert main(['--complaints', str(tmp_path / "missing.csv"), '--blocks', str(BLOCKS)]) == 1


def test_report_rejects_blank_block(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(['--complaints', str(COMPLAINTS), '--blocks', str(BLOCKS), '--block', '   '])

    assert exc_info.value.code == 2
    assert "block name must not be blank" in capsys.readouterr().err
