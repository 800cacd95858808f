"""Tests for the command line entry point."""

import logging

import numpy as np
import pytest

import main
from mesh.export import load_mesh_npz
from shared.version import get_version


@pytest.fixture
def restore_logging():
    """Undo basicConfig(force=True) done by main.setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def tile_file(tmp_path, make_text):
    path = tmp_path / 'tile.txt'
    path.write_text(make_text(np.full((256, 256), 5.0)), encoding='utf-8')
    return path


class TestParser:
    """Tests for argument parsing and settings resolution."""

    def test_defaults(self, tile_file):
        args = main.build_parser().parse_args([str(tile_file)])
        settings = main.resolve_settings(args)
        assert settings.lod.name == 'NEAR'
        assert settings.tile_size == 100.0

    def test_overrides(self, tile_file):
        args = main.build_parser().parse_args(
            [str(tile_file), '--lod', 'far', '--tile-size', '10', '--format', 'obj']
        )
        settings = main.resolve_settings(args)
        assert settings.lod.name == 'FAR'
        assert settings.tile_size == 10.0
        assert settings.export_format.value == 'obj'

    def test_profile_then_flags(self, tmp_path, tile_file, monkeypatch):
        monkeypatch.setenv('TERRAIN_MESHER_PROFILES_DIR', str(tmp_path / 'profiles'))
        profile = tmp_path / 'p.toml'
        profile.write_text('tile_size = 3.0\nlod = "mid"\n', encoding='utf-8')
        args = main.build_parser().parse_args(
            [str(tile_file), '--profile', str(profile), '--lod', 'near']
        )
        settings = main.resolve_settings(args)
        assert settings.tile_size == 3.0
        assert settings.lod.name == 'NEAR'

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main.build_parser().parse_args(['--version'])
        assert exc.value.code == 0
        assert get_version() in capsys.readouterr().out

    def test_output_path(self, tmp_path, tile_file):
        args = main.build_parser().parse_args([str(tile_file), '--lod', 'mid'])
        settings = main.resolve_settings(args)
        assert main.output_path_for(tile_file, settings, None) == tmp_path / 'tile_mid.npz'
        assert main.output_path_for(tile_file, settings, tmp_path / 'o') == tmp_path / 'o' / 'tile_mid.npz'


@pytest.mark.usefixtures('restore_logging')
class TestMain:
    """End-to-end runs of main()."""

    def test_writes_mesh(self, tmp_path, tile_file):
        out_dir = tmp_path / 'out'
        code = main.main(
            [str(tile_file), '--lod', 'far', '--output-dir', str(out_dir), '--log-dir', str(tmp_path / 'log')]
        )
        assert code == 0
        mesh = load_mesh_npz(out_dir / 'tile_far.npz')
        assert mesh.vertex_count == 33 * 33
        assert (tmp_path / 'log' / 'terrain_mesher.log').exists()

    def test_obj_output(self, tmp_path, tile_file):
        code = main.main(
            [str(tile_file), '--format', 'obj', '--lod', '0', '--log-dir', str(tmp_path / 'log')]
        )
        assert code == 0
        assert (tmp_path / 'tile_far.obj').exists()

    def test_failed_tile_exit_code(self, tmp_path, tile_file):
        bad = tmp_path / 'bad.txt'
        bad.write_text('oops\n', encoding='utf-8')
        code = main.main(
            [str(bad), str(tile_file), '--lod', 'far', '--log-dir', str(tmp_path / 'log')]
        )
        assert code == 1
        assert (tmp_path / 'tile_far.npz').exists()
        assert not (tmp_path / 'bad_far.npz').exists()

    def test_invalid_settings_exit_code(self, tmp_path, tile_file):
        code = main.main(
            [str(tile_file), '--tile-size', '-1', '--log-dir', str(tmp_path / 'log')]
        )
        assert code == 2

    def test_missing_profile_exit_code(self, tmp_path, tile_file, monkeypatch):
        monkeypatch.setenv('TERRAIN_MESHER_PROFILES_DIR', str(tmp_path / 'profiles'))
        code = main.main(
            [str(tile_file), '--profile', 'ghost', '--log-dir', str(tmp_path / 'log')]
        )
        assert code == 2

    def test_unwritable_output_dir_exit_code(self, tmp_path, tile_file):
        """A failed export is counted as a failed tile, not a crash."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory', encoding='utf-8')
        code = main.main(
            [
                str(tile_file),
                '--lod',
                'far',
                '--output-dir',
                str(blocker / 'out'),
                '--log-dir',
                str(tmp_path / 'log'),
            ]
        )
        assert code == 1
        log_text = (tmp_path / 'log' / 'terrain_mesher.log').read_text(encoding='utf-8')
        assert 'Failed to write' in log_text
        assert 'Memory usage (after batch)' in log_text

    def test_same_stem_does_not_overwrite(self, tmp_path, make_text):
        """Inputs sharing a file name get distinct outputs in one directory."""
        first = tmp_path / 'a' / 'tile.txt'
        second = tmp_path / 'b' / 'tile.txt'
        for path, height in ((first, 1.0), (second, 2.0)):
            path.parent.mkdir()
            path.write_text(make_text(np.full((256, 256), height)), encoding='utf-8')
        out_dir = tmp_path / 'out'

        code = main.main(
            [
                str(first),
                str(second),
                '--lod',
                'far',
                '--output-dir',
                str(out_dir),
                '--log-dir',
                str(tmp_path / 'log'),
            ]
        )

        assert code == 0
        heights = {
            name: float(load_mesh_npz(out_dir / name).positions()[0][1])
            for name in ('tile_far.npz', 'tile_far_2.npz')
        }
        assert heights == {'tile_far.npz': 1.0, 'tile_far_2.npz': 2.0}


class TestUniquePath:
    """Tests for output name de-duplication."""

    def test_free_name_kept(self, tmp_path):
        path = tmp_path / 'x_far.npz'
        assert main._unique_path(path, set()) == path

    def test_suffix_added(self, tmp_path):
        path = tmp_path / 'x_far.npz'
        taken = {path, tmp_path / 'x_far_2.npz'}
        assert main._unique_path(path, taken) == tmp_path / 'x_far_3.npz'
