from PIL import Image

import assets
import config


def write_png(path, color=(0, 128, 0, 255)):
    Image.new("RGBA", (32, 32), color=color).save(path)


def test_frames_load_with_placeholders_for_missing(tmp_path):
    write_png(tmp_path / "crackleaf.png")
    write_png(tmp_path / "啄1.png", color=(0, 0, 255, 255))

    frames = assets.load_all_animation_frames(tmp_path)

    assert set(frames) == set(config.FRAME_SETS)
    for key, names in config.FRAME_SETS.items():
        assert len(frames[key]) == len(names)
    assert frames["logo"][0].size == (32, 32)
    assert frames["peck"][0].getpixel((0, 0)) == (0, 0, 255, 255)
    # 啄2 is missing
    assert frames["peck"][1].size == config.PLACEHOLDER_SIZE
    assert frames["peck"][1].getpixel((0, 0)) == (200, 50, 50, 255)


def test_success_reverse_mirrors_forward_sequence(tmp_path):
    for idx in range(1, 6):
        write_png(tmp_path / f"成功{idx}.png", color=(idx, 0, 0, 255))
    frames = assets.load_all_animation_frames(tmp_path)
    forward = [img.getpixel((0, 0))[0] for img in frames["success"]]
    reverse = [img.getpixel((0, 0))[0] for img in frames["success_reverse"]]
    assert forward == [1, 2, 3, 4, 5]
    assert reverse == [5, 4, 3, 2, 1]


def test_happy_loop_ping_pongs():
    assert config.FRAME_SETS["happy_loop"] == ["高兴1", "高兴2", "高兴3", "高兴4", "高兴3", "高兴2", "高兴1"]


def test_resolve_assets_dir_prefers_cwd(tmp_path, monkeypatch):
    app = tmp_path / "app"
    (app / "assets").mkdir(parents=True)
    monkeypatch.setattr(assets, "app_dir", lambda: app)

    monkeypatch.chdir(tmp_path)
    assert assets.resolve_assets_dir() == app / "assets"

    (tmp_path / "assets").mkdir()
    assert assets.resolve_assets_dir().resolve() == (tmp_path / "assets").resolve()


def test_resolve_assets_dir_macos_bundle(tmp_path, monkeypatch):
    macos = tmp_path / "CrackLeaf.app" / "Contents" / "MacOS"
    resources = tmp_path / "CrackLeaf.app" / "Contents" / "Resources" / "assets"
    macos.mkdir(parents=True)
    resources.mkdir(parents=True)
    monkeypatch.setattr(assets, "app_dir", lambda: macos)
    monkeypatch.chdir(tmp_path)
    assert assets.resolve_assets_dir() == resources


def test_pick_font_family():
    assert assets.pick_font_family(["Arial", "Huiwenfangsong"]) == "Huiwenfangsong"
    assert assets.pick_font_family(["Arial", "SimSun"]) == "SimSun"
    assert assets.pick_font_family(["Arial"]) == "TkDefaultFont"


def test_register_font_missing_file(tmp_path):
    assert assets.register_font(tmp_path) is None
