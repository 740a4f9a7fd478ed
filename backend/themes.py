"""Theme catalog shared by the course engine and the language-model prompt.

Each theme carries its spot predicate as data (a set of categories plus two
flags) so that the catalog can be inspected, served over the API and checked
for duplicate semantics.
"""

import random
from dataclasses import dataclass, field

import config
from models import Spot


@dataclass(frozen=True)
class Theme:
    id: str
    key: str
    label: str
    description: str
    categories: frozenset[str] = field(default_factory=frozenset)
    photo: bool = False        # also match spots carrying a photo
    hidden_gem: bool = False   # match spots with few or no ratings

    @property
    def title(self) -> str:
        """Label text after the first colon (the label itself if there is none)."""
        _, sep, rest = self.label.partition(":")
        return rest.strip() if sep else self.label

    @property
    def signature(self) -> tuple[frozenset[str], bool, bool]:
        return self.categories, self.photo, self.hidden_gem

    def matches(self, spot: Spot) -> bool:
        if spot.category in self.categories:
            return True
        if self.photo and spot.tags.get("photo"):
            return True
        if self.hidden_gem:
            total = spot.user_ratings_total
            return not total or total < config.HIDDEN_GEM_MAX_RATINGS
        return False


def _theme(id, key, label, description, categories=(), photo=False, hidden_gem=False) -> Theme:
    return Theme(id, key, label, description, frozenset(categories), photo, hidden_gem)


THEMES: list[Theme] = [
    _theme("time_travel", "Time Travel", "🕰️ Time Travel: 時代を感じる歴史旅",
           "古き良き日本の風情と歴史のロマンを感じる旅。", ("history", "art")),
    _theme("nature", "Nature", "🌿 Nature's Whisper: 静寂と緑",
           "都会の喧騒を離れ、自然の中で心を癒やすひととき。", ("nature",)),
    _theme("urban", "Urban", "🏙️ Urban Jungle: 都会の喧騒と魅力を歩く",
           "活気ある街のエネルギーと最新トレンドを体感。", ("shopping", "gourmet")),
    _theme("spiritual", "Spiritual", "⛩️ Spiritual Awakening: 神社仏閣とパワースポット",
           "心身を清め、運気を上げるパワースポット巡り。", ("history",)),
    _theme("gourmet", "Gourmet", "🍽️ Gourmet Adventure: 美食と食べ歩き",
           "地元の美味しいものを探し求める食道楽の旅。", ("gourmet",)),
    _theme("art", "Art", "🎨 Art & Soul: アートとクリエイティブ",
           "感性を刺激するアートスポットとクリエイティブな空間。", ("art",), photo=True),
    _theme("hidden", "Hidden", "💎 Hidden Gems: 地元民しか知らない穴場",
           "観光ガイドには載らない、知る人ぞ知る名店や旧跡。", hidden_gem=True),
    _theme("photo", "Photo", "📸 Photogenic: 思わず写真を撮りたくなる風景",
           "SNS映え間違いなしの美しい風景と思い出作り。", ("nature", "art"), photo=True),
    _theme("retro", "Retro", "☕ Retro Revival: 昭和レトロな純喫茶・路地裏",
           "昭和の懐かしさが漂うノスタルジックな世界へ。", ("gourmet", "history")),
    _theme("luxury", "Luxury", "✨ Luxury & Leisure: ちょっぴり贅沢な大人の休日",
           "優雅な時間を過ごす、大人ならではの贅沢プラン。", ("art", "gourmet")),
    _theme("mystery", "Mystery", "👻 Mystery & Legend: ちょっと怖い伝説・ミステリー",
           "不思議な伝説やミステリアスな逸話が残る場所へ。", ("history",)),
    _theme("local", "Local", "🛍️ Local Life: 商店街と地元民の暮らし",
           "地元に愛される商店街や日常の風景を歩く。", ("shopping", "gourmet")),
    _theme("architecture", "Arch", "🏛️ Architecture Walk: 名建築とユニークな建物",
           "建物のデザインや構造美を楽しむ建築探訪。", ("history", "art")),
    _theme("silence", "Silence", "🤫 Silence & Solitude: 究極の「おひとりさま」静寂",
           "誰にも邪魔されず、静かに自分と向き合う時間。", ("nature", "history")),
    _theme("morning", "Morning", "🌅 Morning/Evening Glow: 朝焼け・夕焼けが美しい場所",
           "光と影が織りなす美しい瞬間を捉える旅。", ("nature",), photo=True),
]

THEMES_BY_ID: dict[str, Theme] = {t.id: t for t in THEMES}


def select_themes(
    rng: random.Random,
    catalog: list[Theme] = THEMES,
    count: int = config.THEMES_PER_BATCH,
) -> list[Theme]:
    """Draw `count` distinct themes uniformly without replacement."""
    return rng.sample(catalog, min(count, len(catalog)))
