"""Tests for the command line entry point."""

import json
import logging

from logging_config import setup_logging
from main import main

SMALL = ['--seed', 'abc', '--width', '200', '--height', '200', '--padding', '10']


def test_species_listing(capsys):
    assert main(['species']) == 0
    out = capsys.readouterr().out
    assert 'sakura' in out
    assert 'wisteria' in out


def test_info_prints_trunk_start(capsys):
    assert main(['info', *SMALL]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info['seed'] == 'abc'
    assert set(info['trunk_start_position']) == {'x', 'y'}
    assert info['full_distance'] > info['max_distance']


def test_image_written(tmp_path, assets_dir):
    output = tmp_path / 'plant.png'
    assert main(['image', *SMALL, '--assets', str(assets_dir), '-o', str(output)]) == 0
    assert output.read_bytes().startswith(b'\x89PNG')


def test_image_at_progress(tmp_path):
    output = tmp_path / 'seek' / 'plant.png'
    assert main(['image', *SMALL, '--at', '150', '-o', str(output)]) == 0
    assert output.exists()


def test_export_with_saved_config(tmp_path):
    output = tmp_path / 'structure.json'
    saved = tmp_path / 'effective.json'
    assert main(['export', *SMALL, '--species', 'cedar', '-o', str(output), '--save-config', str(saved)]) == 0
    assert json.loads(output.read_text())['species'] == 'cedar'
    assert json.loads(saved.read_text())['species'] == 'cedar'


def test_error_exit_status():
    assert main(['image', '--species', 'baobab']) == 1


def test_missing_encoder_exit_status(tmp_path):
    args = ['video', *SMALL, '--fps', '2', '--duration', '1', '--ffmpeg', 'seedbloom-no-such-ffmpeg',
            '-o', str(tmp_path / 'v.webm')]
    assert main(args) == 1


def test_setup_logging_is_idempotent(tmp_path):
    log_file = tmp_path / 'run.log'
    setup_logging(logging.DEBUG, str(log_file))
    logger = setup_logging(logging.DEBUG, str(log_file))
    assert len(logging.getLogger('growth').handlers) == 2
    logger.info("hello")
    assert 'seedbloom - INFO - hello' in log_file.read_text()
