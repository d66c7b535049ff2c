# tests/test_transcript_file_source.py
import queue
import time
from unittest.mock import Mock

import pytest

from autoscroll.sources.TranscriptFileSource import TranscriptFileSource


@pytest.fixture
def transcript(tmp_path):
    path = tmp_path / "heard.txt"
    path.write_text("mudam se os tempos\n\n   \no tempo cobre o chão\nque não se muda\n", encoding="utf-8")
    return path


@pytest.fixture
def config():
    return {"transcript": {"interval": 0.01}}


class TestTranscriptFileSource:

    def test_loads_non_blank_lines(self, transcript, config):
        source = TranscriptFileSource(queue.Queue(), config, transcript)

        assert source.fragments == ["mudam se os tempos", "o tempo cobre o chão", "que não se muda"]
        assert source.interval == 0.01

    def test_missing_file_raises(self, tmp_path, config):
        with pytest.raises(FileNotFoundError):
            TranscriptFileSource(queue.Queue(), config, tmp_path / "nope.txt")

    def test_default_interval(self, transcript):
        assert TranscriptFileSource(queue.Queue(), {}, transcript).interval == 1.5

    def test_replays_all_fragments_in_order(self, transcript, config):
        fragment_queue = queue.Queue()
        source = TranscriptFileSource(fragment_queue, config, transcript, source_name="replay")

        source.start()
        source.thread.join(timeout=2.0)

        fragments = [fragment_queue.get_nowait() for _ in range(fragment_queue.qsize())]
        assert [f.text for f in fragments] == source.fragments
        assert all(f.source == "replay" for f in fragments)
        assert not source.is_running

    def test_full_queue_drops_fragments(self, transcript, config):
        fragment_queue = queue.Queue(maxsize=1)
        source = TranscriptFileSource(fragment_queue, config, transcript)

        source.start()
        source.thread.join(timeout=2.0)

        assert fragment_queue.qsize() == 1
        assert fragment_queue.get_nowait().text == "mudam se os tempos"

    def test_stop_interrupts_interval_wait(self, transcript):
        source = TranscriptFileSource(queue.Queue(), {"transcript": {"interval": 30}}, transcript)
        source.start()

        started = time.time()
        source.stop()

        assert time.time() - started < 1.0
        assert not source.thread.is_alive()

    def test_shutdown_state_stops_source(self, transcript, config):
        source = TranscriptFileSource(queue.Queue(), config, transcript)
        source.stop = Mock()

        source.on_state_change('running', 'paused')
        source.stop.assert_not_called()

        source.on_state_change('running', 'shutdown')
        source.stop.assert_called_once()
