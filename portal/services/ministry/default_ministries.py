"""
Parish ministries loaded by ``MinistryService.seed_default_ministries``.

Adult discipleship ministries route through the adult discipleship
coordinator; everything else is published without an approval step.
"""

ADULT_DISCIPLESHIP = "adult-discipleship"

DEFAULT_MINISTRIES = [
    # Adult Discipleship (approval required)
    {
        "name": "Adult Bible Study",
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Weekly adult Bible study groups",
    },
    {
        "name": "Adult Faith Formation",
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Adult spiritual growth and formation programs",
    },
    {
        "name": "Adult Discipleship Retreat",
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Retreats focused on adult spiritual development",
    },
    {
        "name": "Men's Ministry",
        "aliases": ["Mens Ministry", "Men's Group"],
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Ministry focused on men's spiritual growth",
    },
    {
        "name": "Women's Ministry",
        "aliases": ["Womens Ministry", "Women's Group"],
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Ministry focused on women's spiritual growth",
    },
    {
        "name": "Small Groups",
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Adult small group Bible studies and fellowship",
    },
    {
        "name": "Adult Education",
        "requires_approval": True,
        "approval_coordinator": ADULT_DISCIPLESHIP,
        "description": "Educational programs for adult spiritual development",
    },
    # Other ministries
    {
        "name": "Youth Ministry",
        "aliases": ["Youth Group"],
        "description": "Programs for teenagers and high school students",
    },
    {
        "name": "Children's Ministry",
        "aliases": ["Childrens Ministry"],
        "description": "Programs for children and elementary students",
    },
    {"name": "Music Ministry", "description": "Choir, worship team, and music programs"},
    {"name": "Outreach Ministry", "description": "Community outreach and service projects"},
    {"name": "Missions", "description": "Local and international mission work"},
    {"name": "Hospitality", "description": "Fellowship meals and welcoming ministries"},
    {"name": "Prayer Ministry", "description": "Prayer groups and intercession"},
    {"name": "Facilities", "description": "Building maintenance and facility management"},
    {"name": "Stewardship", "description": "Financial stewardship and giving programs"},
    {"name": "Senior Ministry", "description": "Programs for senior adults"},
    {"name": "Communications", "description": "Church communications and media"},
    {"name": "Pastoral Care", "description": "Care and support ministries"},
]
