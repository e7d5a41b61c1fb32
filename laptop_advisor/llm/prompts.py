"""Prompt builders for laptop narratives.

Every prompt ends with the exact JSON shape expected back. All numbers in a
prompt come from the analysis engine; the model only writes the prose.
"""

from __future__ import annotations

from ..analysis.models import GameEstimate, Playability, PriceAnalysis, UsageScores
from ..common.models import ParsedSpec, RecommendRequest

USAGE_LABELS: dict[str, str] = {
    "gaming": "게임",
    "work": "작업/코딩",
    "student": "학생",
    "video": "영상편집",
    "portable": "휴대성",
}


def _won(amount: float | None) -> str:
    return f"{amount:,.0f}" if amount else "?"


def _screen_line(spec: ParsedSpec) -> str:
    parts = [
        f"{spec.screen_size or '?'}인치",
        spec.resolution or "",
        f"{spec.effective_refresh_rate}Hz",
        spec.panel_type or "",
    ]
    return " ".join(p for p in parts if p)


def build_analysis_prompt(
    name: str,
    spec: ParsedSpec,
    price_analysis: PriceAnalysis,
    scores: UsageScores,
    game_estimates: list[GameEstimate],
    months_since_release: int | None = None,
) -> str:
    """Single-product analysis: pros, cons, per-usage summaries, buy advice."""
    top_games = ", ".join(
        f"{g.game_name}: 보통 옵션 {g.fps_mid}fps"
        for g in [g for g in game_estimates if g.playability != Playability.POOR][:4]
    )
    release_info = (
        f"출시 {months_since_release}개월 경과"
        if months_since_release is not None
        else "출시일 미상"
    )
    cpu = spec.cpu + (f" ({spec.cpu_gen})" if spec.cpu_gen else "")
    gpu = (spec.gpu or "내장 그래픽") + (f" {spec.gpu_vram}GB" if spec.gpu_vram else "")
    ram = f"{spec.ram_gb}GB" + (f" {spec.ram_type}" if spec.ram_type else "")

    return f"""\
당신은 노트북 전문가입니다. 아래 노트북 정보를 바탕으로 초등학생도 이해할 수 있는 쉬운 한국어로 분석해 주세요.
응답은 반드시 JSON 형식으로만 해주세요. 설명은 짧고 명확하게, 전문 용어는 쉽게 풀어서 작성하세요.

## 제품 정보
- 이름: {name}
- CPU: {cpu}
- GPU: {gpu}
- RAM: {ram}
- SSD: {spec.ssd_gb}GB
- 화면: {_screen_line(spec)}
- 무게: {spec.weight_kg or '?'}kg
- {release_info}

## 현재 가격
- 최저가: {_won(price_analysis.current_lowest)}원
- 30일 평균: {_won(price_analysis.avg_30d)}원
- 가격 상태: {price_analysis.summary}

## 분석 점수 (100점 만점)
- 게임용: {scores.gaming}점
- 작업/코딩용: {scores.work}점
- 학생용: {scores.student}점
- 영상편집: {scores.video}점
- 휴대성: {scores.portable}점

## 게임 성능 (주요 게임)
{top_games or '게임 성능 낮음'}

## 응답 형식 (JSON)
{{
  "pros": ["장점1", "장점2", "장점3"],
  "cons": ["단점1", "단점2", "단점3"],
  "usageSummaries": {{
    "gaming": "게임 용도 한 줄 평가",
    "work": "작업/코딩 한 줄 평가",
    "student": "학생 사용 한 줄 평가",
    "video": "영상편집 한 줄 평가",
    "portable": "휴대성 한 줄 평가"
  }},
  "shouldBuyConclusion": "지금 사도 되는지 판단 (2~3문장)",
  "bestFor": "이런 분께 추천합니다 (1문장)"
}}"""


def build_comparison_prompt(
    products: list[tuple[str, ParsedSpec, PriceAnalysis, UsageScores]],
) -> str:
    """Side-by-side comparison of 2-3 laptops.

    Args:
        products: (name, spec, price analysis, usage scores) per laptop.
    """
    sections = []
    for i, (name, spec, price_analysis, scores) in enumerate(products, start=1):
        sections.append(
            f"""
### 제품 {i}: {name}
- CPU: {spec.cpu}, GPU: {spec.gpu or '내장 그래픽'}
- RAM: {spec.ram_gb}GB, SSD: {spec.ssd_gb}GB
- 화면: {spec.screen_size or '?'}인치 {spec.effective_refresh_rate}Hz
- 무게: {spec.weight_kg or '?'}kg
- 최저가: {_won(price_analysis.current_lowest)}원
- 점수: 게임 {scores.gaming}점 / 작업 {scores.work}점 / 학생 {scores.student}점 / 휴대 {scores.portable}점"""
        )

    return f"""\
당신은 노트북 전문가입니다. 아래 {len(products)}개 노트북을 비교 분석해 주세요.
쉬운 한국어로, 각 제품의 강점과 약점을 비교하고 어떤 사용자에게 어떤 제품이 맞는지 추천해 주세요.
응답은 JSON 형식으로만 해주세요.
{''.join(sections)}

## 응답 형식 (JSON)
{{
  "summary": "전체 비교 요약 (2~3문장)",
  "winner": {{
    "gaming": "게임 최고 제품명",
    "work": "작업 최고 제품명",
    "student": "학생 최고 제품명",
    "portable": "휴대성 최고 제품명",
    "value": "가성비 최고 제품명"
  }},
  "recommendations": [
    {{"persona": "어떤 사람", "product": "추천 제품명", "reason": "이유"}}
  ],
  "conclusion": "최종 결론 (3~4문장)"
}}"""


def build_recommend_prompt(
    request: RecommendRequest,
    top_products: list[tuple[str, int | None, UsageScores, float]],
) -> str:
    """Explain why the top recommendations fit the buyer's conditions.

    Args:
        request: The wizard query.
        top_products: (name, current price, usage scores, match score),
            best first. Only the first three are included.
    """
    usage_text = ", ".join(USAGE_LABELS.get(u.value, u.value) for u in request.usage) or "일반"
    budget_text = (
        f"{request.budget.min:,}원 ~ {request.budget.max:,}원"
        if request.budget
        else "제한 없음"
    )
    priority_text = request.priority.value if request.priority else "없음"

    product_list = "\n".join(
        f"""
{i}. {name}
   - 가격: {_won(price)}원
   - 용도 점수: 게임 {scores.gaming}점 / 작업 {scores.work}점
   - 매칭 점수: {match_score:.0f}점"""
        for i, (name, price, scores, match_score) in enumerate(top_products[:3], start=1)
    )

    return f"""\
당신은 노트북 구매 컨설턴트입니다. 사용자 조건에 맞는 추천 이유를 쉬운 한국어로 설명해 주세요.

## 사용자 조건
- 예산: {budget_text}
- 용도: {usage_text}
- 우선순위: {priority_text}

## 추천 후보 제품
{product_list}

## 응답 형식 (JSON)
{{
  "intro": "사용자 상황 이해 한 줄",
  "recommendations": [
    {{
      "rank": 1,
      "name": "제품명",
      "reason": "이 제품을 추천하는 이유 (2~3문장)",
      "highlight": "핵심 강점 한 줄"
    }}
  ],
  "tip": "구매 팁 또는 주의사항 (1~2문장)"
}}"""
