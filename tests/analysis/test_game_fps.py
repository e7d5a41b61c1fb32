"""Tests for per-game FPS estimation."""

from laptop_advisor.analysis.game_fps import (
    FPS_CAP,
    GAME_FPS_TABLE,
    PLAYABILITY_LABELS,
    classify_playability,
    estimate_game_fps,
    sort_by_playability,
)
from laptop_advisor.analysis.models import Playability


class TestCatalog:
    def test_every_game_has_all_tiers(self):
        assert len(GAME_FPS_TABLE) == 11
        for _, fps_table in GAME_FPS_TABLE.values():
            assert sorted(fps_table) == list(range(1, 11))

    def test_labels_cover_every_playability(self):
        assert set(PLAYABILITY_LABELS) == set(Playability)
        assert PLAYABILITY_LABELS[Playability.EXCELLENT] == "매우 쾌적"


class TestClassifyPlayability:
    def test_thresholds_at_60hz(self):
        assert classify_playability(120) == Playability.EXCELLENT
        assert classify_playability(60) == Playability.GOOD
        assert classify_playability(36) == Playability.FAIR
        assert classify_playability(35) == Playability.POOR

    def test_high_refresh_still_targets_60(self):
        assert classify_playability(60, refresh_rate=240) == Playability.GOOD

    def test_low_refresh_lowers_target(self):
        assert classify_playability(30, refresh_rate=30) == Playability.GOOD


class TestEstimateGameFps:
    def test_returns_catalog_order(self):
        estimates = estimate_game_fps(5)
        assert [e.game_slug for e in estimates] == list(GAME_FPS_TABLE)
        assert estimates[0].game_name == "리그 오브 레전드"

    def test_top_tier_never_exceeds_cap(self):
        for e in estimate_game_fps(10, refresh_rate=240):
            assert max(e.fps_low, e.fps_mid, e.fps_high) <= FPS_CAP

    def test_tier_is_clamped(self):
        assert estimate_game_fps(0) == estimate_game_fps(1)
        assert estimate_game_fps(99) == estimate_game_fps(10)

    def test_integrated_graphics(self):
        by_slug = {e.game_slug: e for e in estimate_game_fps(1)}

        lol = by_slug["lol"]
        assert (lol.fps_high, lol.fps_mid, lol.fps_low) == (80, 50, 30)
        assert lol.playability == Playability.FAIR
        assert lol.summary == "낮은 옵션에서 30fps로 간신히 플레이 가능합니다. 옵션 타협이 필요합니다."

        cyberpunk = by_slug["cyberpunk2077"]
        assert cyberpunk.playability == Playability.POOR
        assert cyberpunk.summary == "사이버펑크 2077을 원활하게 즐기기 어렵습니다."

    def test_excellent_summary_uses_high_fps(self):
        lol = estimate_game_fps(8)[0]
        assert lol.playability == Playability.EXCELLENT
        assert lol.summary == "최상 옵션에서도 360fps로 매우 쾌적하게 즐길 수 있습니다."

    def test_good_summary_at_medium_settings(self):
        pubg = {e.game_slug: e for e in estimate_game_fps(4)}["pubg"]
        assert pubg.playability == Playability.GOOD
        assert pubg.summary == "보통 옵션에서 60fps로 원활하게 플레이 가능합니다."

    def test_good_below_60fps_mentions_low_settings(self):
        valorant = {e.game_slug: e for e in estimate_game_fps(1, refresh_rate=30)}["valorant"]
        assert valorant.playability == Playability.GOOD
        assert valorant.summary == "낮은 옵션에서 25fps로 플레이 가능합니다."


class TestSortByPlayability:
    def test_best_first_and_stable(self):
        estimates = estimate_game_fps(3)
        ordered = sort_by_playability(estimates)
        ranks = [list(Playability).index(e.playability) for e in ordered]
        assert ranks == sorted(ranks)
        # games sharing a playability keep catalog order
        excellent = [e.game_slug for e in ordered if e.playability == Playability.EXCELLENT]
        assert excellent == [
            e.game_slug for e in estimates if e.playability == Playability.EXCELLENT
        ]
