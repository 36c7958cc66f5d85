import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ..search.data_source import InMemoryDataSource
from ..search.models import GroupEntity, OrganizationEntity, PersonEntity, PostEntity, WorkEntity

logger = logging.getLogger(__name__)

IMG = {
    "one_piece_cover": "https://s4.anilist.co/file/anilistcdn/media/anime/cover/large/bx21-YCDoj1EkAxFn.jpg",
    "aot_cover": "https://s4.anilist.co/file/anilistcdn/media/anime/cover/large/bx16498-C6FPmWm59CyP.jpg",
    "demon_slayer_cover": "https://s4.anilist.co/file/anilistcdn/media/anime/cover/large/bx101922-PEn1CTc93blC.jpg",
    "jjk_anime_cover": "https://s4.anilist.co/file/anilistcdn/media/anime/cover/large/bx113415-bbBWj4pEFseh.jpg",
    "berserk_cover": "https://upload.wikimedia.org/wikipedia/en/4/4a/Berserk_vol01.png",
    "chainsaw_man_cover": "https://upload.wikimedia.org/wikipedia/it/c/cb/Chainsaw_Man_Volume_1.jpg",
    "one_punch_man_cover": "https://upload.wikimedia.org/wikipedia/en/c/c3/OnePunchMan_manga_cover.png",
    "vagabond_cover": "https://upload.wikimedia.org/wikipedia/en/7/7a/Vagabond_vol01.png",
    "killing_joke_cover": "https://upload.wikimedia.org/wikipedia/en/3/32/Killingjoke.JPG",
    "watchmen_cover": "https://upload.wikimedia.org/wikipedia/en/a/a2/Watchmen%2C_issue_1.jpg",
    "luffy_avatar": "https://upload.wikimedia.org/wikipedia/commons/b/bf/Cosplay_-_AWA15_-_Monkey_D._Luffy_%283982426960%29.jpg",
    "naruto_avatar": "https://upload.wikimedia.org/wikipedia/commons/6/6b/Cosplay_-_AWA15_-_Naruto_Uzumaki_%283982533553%29.jpg",
    "mikasa_avatar": "https://upload.wikimedia.org/wikipedia/commons/9/9b/New_York_Comic_Con_2013_-_Mikasa_cropped_image_%2810275581946%29.jpg",
    "gojo_avatar": "https://upload.wikimedia.org/wikipedia/commons/4/4c/Satoru_Goj%C5%8D_cosplay.jpg",
    "toei_logo": "https://upload.wikimedia.org/wikipedia/commons/0/09/Toei_Animation_Logo.png",
    "mappa_logo": "https://upload.wikimedia.org/wikipedia/commons/thumb/0/06/MAPPA_Logo.svg/3840px-MAPPA_Logo.svg.png",
}

PEOPLE = [
    {"id": "u_1", "username": "dev.luffy", "display_name": "dev.luffy", "role": "creator", "verified": True,
     "followers": 48210, "bio": "Founder @ Fanaara • Clean Architecture • scaling community systems",
     "avatar_url": IMG["luffy_avatar"], "age_hours": 2},
    {"id": "u_2", "username": "gojo.sensei", "display_name": "Gojo Sensei", "role": "influencer", "verified": True,
     "followers": 129004, "bio": "Edits • weekly reviews • spoiler-safe hot takes",
     "avatar_url": IMG["gojo_avatar"], "age_hours": 5},
    {"id": "u_3", "username": "mikasa.guard", "display_name": "Mikasa Guard", "role": "creator", "verified": False,
     "followers": 22140, "bio": "Panel breakdowns • OST appreciation • rewatch threads",
     "avatar_url": IMG["mikasa_avatar"], "age_hours": 30},
    {"id": "u_4", "username": "naruto.runner", "display_name": "Naruto Runner", "role": "user", "verified": False,
     "followers": 2210, "bio": "I watch anything with great pacing 🔥",
     "avatar_url": IMG["naruto_avatar"], "age_hours": 70},
    {"id": "u_5", "username": "studio.insider", "display_name": "Studio Insider", "role": "influencer", "verified": False,
     "followers": 9870, "bio": "Production nerd • staff tracking • PV breakdowns",
     "avatar_url": IMG["mappa_logo"], "age_hours": 12},
    {"id": "u_6", "username": "manga.lab", "display_name": "Manga Lab", "role": "creator", "verified": True,
     "followers": 64210, "bio": "Seinen & shonen reviews • theory threads (tagged spoilers)", "age_hours": 48},
    {"id": "u_7", "username": "comic.shelf", "display_name": "Comic Shelf", "role": "creator", "verified": False,
     "followers": 13120, "bio": "Comics recs • character arcs • classic runs", "age_hours": 96},
]

WORKS = [
    {"id": "w_a_1", "work_type": "anime", "title": "One Piece", "year": 1999, "studio": "Toei Animation",
     "status": "ongoing", "rating": 9.0, "genres": ["Adventure", "Action", "Fantasy"],
     "cover_url": IMG["one_piece_cover"], "age_hours": 3},
    {"id": "w_a_2", "work_type": "anime", "title": "Attack on Titan", "year": 2013, "studio": "Wit Studio",
     "status": "completed", "rating": 8.9, "genres": ["Action", "Drama", "Dark Fantasy"],
     "cover_url": IMG["aot_cover"], "age_hours": 200},
    {"id": "w_a_3", "work_type": "anime", "title": "Demon Slayer: Kimetsu no Yaiba", "year": 2019, "studio": "ufotable",
     "status": "ongoing", "rating": 8.6, "genres": ["Action", "Historical", "Supernatural"],
     "cover_url": IMG["demon_slayer_cover"], "age_hours": 20},
    {"id": "w_a_4", "work_type": "anime", "title": "Jujutsu Kaisen", "year": 2020, "studio": "MAPPA",
     "status": "ongoing", "rating": 8.5, "genres": ["Action", "Supernatural"],
     "cover_url": IMG["jjk_anime_cover"], "age_hours": 8},
    {"id": "w_m_1", "work_type": "manga", "title": "Berserk", "year": 1989, "studio": "Young Animal",
     "status": "hiatus", "rating": 9.3, "genres": ["Seinen", "Dark Fantasy", "Drama"],
     "cover_url": IMG["berserk_cover"], "age_hours": 400},
    {"id": "w_m_2", "work_type": "manga", "title": "Chainsaw Man", "year": 2018, "studio": "Shueisha",
     "status": "ongoing", "rating": 8.7, "genres": ["Action", "Horror", "Dark Comedy"],
     "cover_url": IMG["chainsaw_man_cover"], "age_hours": 36},
    {"id": "w_m_3", "work_type": "manga", "title": "One-Punch Man", "year": 2012, "studio": "Shueisha",
     "status": "ongoing", "rating": 8.5, "genres": ["Action", "Comedy", "Superhero"],
     "cover_url": IMG["one_punch_man_cover"], "age_hours": 60},
    {"id": "w_m_4", "work_type": "manga", "title": "Vagabond", "year": 1998, "studio": "Kodansha",
     "status": "hiatus", "rating": 9.1, "genres": ["Seinen", "Historical", "Drama"],
     "cover_url": IMG["vagabond_cover"], "age_hours": 900},
    {"id": "w_c_1", "work_type": "comic", "title": "Batman: The Killing Joke", "year": 1988, "studio": "DC Comics",
     "status": "completed", "rating": 8.8, "genres": ["Superhero", "Crime", "Psychological"],
     "cover_url": IMG["killing_joke_cover"], "age_hours": 700},
    {"id": "w_c_2", "work_type": "comic", "title": "Watchmen (Issue #1)", "year": 1986, "studio": "DC Comics",
     "status": "completed", "rating": 9.0, "genres": ["Superhero", "Drama", "Mystery"],
     "cover_url": IMG["watchmen_cover"], "age_hours": 650},
]

ORGANIZATIONS = [
    {"id": "s_1", "name": "Toei Animation", "country": "JP", "verified": True, "works_count": 250,
     "logo_url": IMG["toei_logo"], "age_hours": 24},
    {"id": "s_2", "name": "MAPPA", "country": "JP", "verified": True, "works_count": 45,
     "logo_url": IMG["mappa_logo"], "age_hours": 6},
    {"id": "s_3", "name": "Wit Studio", "country": "JP", "verified": False, "works_count": 18, "age_hours": 120},
    {"id": "s_4", "name": "ufotable", "country": "JP", "verified": False, "works_count": 22, "age_hours": 80},
]

GROUPS = [
    {"id": "c_1", "name": "Spoiler-Safe One Piece",
     "description": "No-spoiler discussions • episode threads • theories (tagged).",
     "members": 50210, "posts_per_day": 146, "is_official": True, "region": "Global",
     "banner_url": IMG["one_piece_cover"], "age_hours": 1},
    {"id": "c_2", "name": "JJK Power System Lab",
     "description": "Cursed energy breakdowns • domains • staff trivia.",
     "members": 18340, "posts_per_day": 57, "region": "MENA",
     "banner_url": IMG["jjk_anime_cover"], "age_hours": 4},
    {"id": "c_3", "name": "Attack on Titan Analysis",
     "description": "Rewatch threads • symbolism • soundtrack moments.",
     "members": 9250, "posts_per_day": 18, "region": "Global",
     "banner_url": IMG["aot_cover"], "age_hours": 26},
    {"id": "c_4", "name": "Manga Panel Clinic",
     "description": "Panel-by-panel critique • composition • pacing.",
     "members": 12200, "posts_per_day": 31, "region": "MENA",
     "banner_url": IMG["berserk_cover"], "age_hours": 50},
]

POSTS = [
    {"id": "p_1", "title": "How to read PVs without doomposting (production signals 101)",
     "excerpt": "A practical guide: staff credits, schedule hints, and what actually matters when judging production.",
     "author_id": "u_5", "post_type": "article", "age_hours": 6, "reactions": 1280, "comments": 194,
     "tags": ["Production", "Studios", "Guide"]},
    {"id": "p_2", "title": "Jujutsu Kaisen - direction & cuts (spoiler-safe)",
     "excerpt": "Why the scene feels fast even with fewer cuts: timing, camera distance, and sound design.",
     "author_id": "u_2", "post_type": "review", "age_hours": 30, "reactions": 9320, "comments": 865,
     "tags": ["Review", "Anime", "JJK"]},
    {"id": "p_3", "title": "Attack on Titan: ending discussion thread (SPOILERS)",
     "excerpt": "Themes, character arcs, and why the last stretch is divisive. Keep it respectful.",
     "author_id": "u_3", "post_type": "post", "age_hours": 55, "reactions": 4210, "comments": 512,
     "tags": ["Discussion", "AoT", "Spoilers"], "has_spoiler": True},
    {"id": "p_4", "title": "Best OST moments this week",
     "excerpt": "A small playlist of scenes where music carried the emotion. Drop your picks!",
     "author_id": "u_4", "post_type": "post", "age_hours": 2, "reactions": 740, "comments": 88,
     "tags": ["OST", "Weekly"]},
    {"id": "p_5", "title": "Berserk: why composition matters (chapter spotlight)",
     "excerpt": "A look at panel rhythm, negative space, and how action reads on the page.",
     "author_id": "u_6", "post_type": "article", "age_hours": 80, "reactions": 3180, "comments": 263,
     "tags": ["Manga", "Panels", "Berserk"]},
]

TRENDING_QUERIES = ["One Piece", "MAPPA", "Berserk", "Spoiler-Safe", "production"]


def _with_timestamps(records: List[Dict], now: datetime, timestamp_field: str = "updated_at") -> List[Dict]:
    rows = []
    for record in records:
        row = dict(record)
        moment = now - timedelta(hours=row.pop("age_hours", 0))
        row[timestamp_field] = moment
        if timestamp_field != "updated_at":
            row["updated_at"] = moment
        rows.append(row)
    return rows


def seed_entities(now: Optional[datetime] = None) -> Dict[str, List]:
    """Build the seed entities, timestamped relative to now"""
    now = now or datetime.now(timezone.utc)

    entities = {
        "people": [PersonEntity(**row) for row in _with_timestamps(PEOPLE, now)],
        "works": [WorkEntity(**row) for row in _with_timestamps(WORKS, now)],
        "posts": [PostEntity(**row) for row in _with_timestamps(POSTS, now, "created_at")],
        "groups": [GroupEntity(**row) for row in _with_timestamps(GROUPS, now)],
        "organizations": [OrganizationEntity(**row) for row in _with_timestamps(ORGANIZATIONS, now)],
    }

    logger.info("Seed entities built: " + ", ".join(f"{name}={len(rows)}" for name, rows in entities.items()))
    return entities


def build_data_source(now: Optional[datetime] = None) -> InMemoryDataSource:
    """In-memory data source over the seed dataset"""
    return InMemoryDataSource(trending=TRENDING_QUERIES, **seed_entities(now))
