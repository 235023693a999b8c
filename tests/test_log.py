import logging
import pytest
from src.lib.log import ClickHandler, LevelFormatter, setup_logging, no_delay

@pytest.fixture
def clean_root():
	root = logging.getLogger()
	before = list(root.handlers), root.level
	yield root
	for h in list(root.handlers):
		if h not in before[0]:
			root.removeHandler(h)
	root.setLevel(before[1])

def _record(level, msg='hello'):
	return logging.LogRecord('t', level, __file__, 1, msg, None, None)

def test_formatter_labels():
	f = LevelFormatter()
	assert f.format(_record(logging.WARNING)) == '[WARNING] hello'
	assert f.format(_record(logging.CRITICAL)) == '[FATAL] hello'

def test_handler_paces_and_writes_stderr(capsys):
	calls = []
	h = ClickHandler(pace=lambda: calls.append(1))
	h.emit(_record(logging.ERROR, 'disk gone'))
	err = capsys.readouterr().err
	assert '[ERROR] disk gone' in err
	assert calls == [1]

def test_setup_logging_single_handler(clean_root):
	setup_logging(logging.DEBUG)
	setup_logging(logging.INFO)
	ours = [h for h in clean_root.handlers if isinstance(h, ClickHandler)]
	assert len(ours) == 1
	assert clean_root.level == logging.INFO
	assert ours[0].pace is no_delay
