"""Built-in catalog used to seed an empty store and as the offline fallback."""

from familypoints.domain.entities import (
    AppState,
    RewardItem,
    ScoreItem,
    ScoreType,
    User,
    UserRole,
)

DEFAULT_USERS = (
    User(id="parent_1", name="Mom & Dad", role=UserRole.PARENT, avatar="👑"),
    User(id="child_1", name="Ethan", role=UserRole.CHILD, avatar="👦"),
    User(id="child_2", name="Yoyo", role=UserRole.CHILD, avatar="👶"),
)

DEFAULT_SCORE_ITEMS = (
    ScoreItem(id="item_1", label="Chores", points=10, type=ScoreType.POSITIVE, icon="🧹"),
    ScoreItem(id="item_2", label="Great grades", points=20, type=ScoreType.POSITIVE, icon="💯"),
    ScoreItem(id="item_3", label="Helping each other", points=10, type=ScoreType.POSITIVE, icon="🤝"),
    ScoreItem(id="item_4", label="Early to bed, early to rise", points=5, type=ScoreType.POSITIVE, icon="⏰"),
    ScoreItem(id="item_5", label="Messy school bag", points=10, type=ScoreType.NEGATIVE, icon="🎒"),
    ScoreItem(id="item_6", label="Picking fights", points=20, type=ScoreType.NEGATIVE, icon="💢"),
    ScoreItem(id="item_7", label="Bullying", points=30, type=ScoreType.NEGATIVE, icon="😈"),
    ScoreItem(id="item_8", label="Picky eating", points=5, type=ScoreType.NEGATIVE, icon="🥦"),
)

DEFAULT_REWARD_ITEMS = (
    RewardItem(id="reward_1", label="Switch time (30 min)", points=50, icon="🎮"),
    RewardItem(id="reward_2", label="TV time (30 min)", points=30, icon="📺"),
    RewardItem(id="reward_3", label="Snack", points=20, icon="🍪"),
)


def default_state() -> AppState:
    """Return the seed catalog with an empty ledger and mailbox."""
    return AppState(
        users=DEFAULT_USERS,
        score_items=DEFAULT_SCORE_ITEMS,
        reward_items=DEFAULT_REWARD_ITEMS,
    )
