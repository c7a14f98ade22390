from linkpad.core.log import Log


def test_debug_respects_verbosity():
    Log.clear()
    Log.set_verbosity(0)
    before = Log.count()
    Log.debug("hidden detail", 2)
    assert Log.count() == before

    Log.debug("always shown", 0)
    assert Log.count() == before + 1
    timestamp, message = Log.get(-1)
    assert message == "[test_log.py] always shown"


def test_write_to_file(tmp_path):
    Log.add("written record")
    target = tmp_path / "log.txt"
    Log.write_to_file(str(target))
    assert "written record" in target.read_text()
