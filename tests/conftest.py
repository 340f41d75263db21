"""Shared GraphQL response fixtures and signal observers."""

import copy

import pytest

from kickstarter_pamphlet.api.ids import encode_id

PROJECT_PID = 1_606_532_881

LAUNCESTON = {
    "country": "AU",
    "countryName": "Australia",
    "displayableName": "Launceston, AU",
    "id": encode_id("Location", 1_102_380),
    "localizedName": "Launceston",
    "name": "Launceston",
}

AUSTRALIA_SHIPPING = {
    "cost": {"amount": "2.0", "currency": "AUD", "symbol": "$"},
    "id": encode_id("ShippingRule", 10_001),
    "location": {
        "country": "AU",
        "countryName": "Australia",
        "displayableName": "Australia",
        "id": encode_id("Location", 23_424_748),
        "localizedName": "Australia",
        "name": "Australia",
    },
}

WORLDWIDE_SHIPPING = {
    "cost": {"amount": "5.0", "currency": "AUD", "symbol": "$"},
    "id": encode_id("ShippingRule", 10_002),
    "location": {
        "country": "ZZ",
        "countryName": None,
        "displayableName": "Earth",
        "id": encode_id("Location", 1),
        "localizedName": "Rest of World",
        "name": "Rest of World",
    },
}

CREATOR = {
    "chosenCurrency": None,
    "id": encode_id("User", 1_106_263_366),
    "imageUrl": "https://ksr-qa-ugc.imgix.net/assets/avatar.png",
    "isCreator": True,
    "name": "Peppermint Fox",
    "uid": "1106263366",
}


def make_reward(
    reward_id,
    name,
    amount="4.0",
    converted="4.0",
    shipping_preference="restricted",
    expanded_rules=None,
    items=1,
):
    reward = {
        "allowedAddons": {"nodes": []},
        "amount": {"amount": amount, "currency": "AUD", "symbol": "$"},
        "backersCount": 9,
        "convertedAmount": {"amount": converted, "currency": "AUD", "symbol": "$"},
        "description": "Translucent Sticker Sheet",
        "endsAt": None,
        "estimatedDeliveryOn": "2021-06-01",
        "id": encode_id("Reward", reward_id),
        "items": {
            "nodes": [
                {"id": encode_id("RewardItem", 1_170_799 + i), "name": f"Sticker Sheet {i}"}
                for i in range(items)
            ]
        },
        "limit": None,
        "limitPerBacker": 10,
        "name": name,
        "project": {"id": encode_id("Project", PROJECT_PID)},
        "remainingQuantity": None,
        "shippingPreference": shipping_preference,
        "shippingRules": [copy.deepcopy(AUSTRALIA_SHIPPING), copy.deepcopy(WORLDWIDE_SHIPPING)],
        "startsAt": None,
    }
    if expanded_rules is not None:
        reward["shippingRulesExpanded"] = {"nodes": expanded_rules}
    return reward


def make_project_fragment():
    return {
        "availableCardTypes": ["VISA", "MASTERCARD", "AMEX"],
        "backersCount": 135,
        "canComment": False,
        "category": {
            "analyticsName": "Stationery",
            "id": encode_id("Category", 28),
            "name": "Stationery",
            "parentCategory": {"id": encode_id("Category", 26), "name": "Crafts"},
        },
        "commentsCount": 12,
        "country": {"code": "AU", "name": "Australia"},
        "creator": copy.deepcopy(CREATOR),
        "currency": "AUD",
        "deadlineAt": "1620478771",
        "description": "Bespoke, hand-crafted notebooks and stationery.",
        "environmentalCommitments": [
            {
                "commitmentCategory": "long_lasting_design",
                "description": "Notebooks built to last.",
                "id": encode_id("EnvironmentalCommitment", 1),
            },
            {
                "commitmentCategory": "carbon_neutral_shipping",
                "description": "Offsetting every parcel.",
                "id": encode_id("EnvironmentalCommitment", 2),
            },
        ],
        "faqs": {
            "nodes": [
                {
                    "answer": "Yes, worldwide.",
                    "createdAt": "1618000000",
                    "id": encode_id("ProjectFaq", 370_524),
                    "question": "Do you ship internationally?",
                }
            ]
        },
        "finalCollectionDate": None,
        "fxRate": 0.7780,
        "goal": {"amount": "2000.0", "currency": "AUD", "symbol": "$"},
        "image": {
            "id": encode_id("Photo", 1),
            "url": "https://ksr-qa-ugc.imgix.net/assets/project.jpg",
        },
        "isLaunched": True,
        "isProjectOfTheDay": False,
        "isProjectWeLove": True,
        "isWatched": False,
        "launchedAt": "1617886771",
        "location": copy.deepcopy(LAUNCESTON),
        "minPledge": 1,
        "name": "Peppermint Fox Press: Notebooks & Stationery",
        "pid": PROJECT_PID,
        "pledged": {"amount": "5965.0", "currency": "AUD", "symbol": "$"},
        "posts": {"totalCount": 3},
        "prelaunchActivated": False,
        "risks": "Paper supply delays.",
        "slug": "peppermintfox/peppermint-fox-press-notebooks-and-stationery",
        "state": "LIVE",
        "stateChangedAt": "1617886773",
        "story": "<p>It all started with a notebook.</p>",
        "tags": [{"name": "LGBTQIA+"}, None, {"name": None}],
        "url": "https://staging.kickstarter.com/projects/peppermintfox/peppermint-fox-press-notebooks-and-stationery",
        "usdExchangeRate": 0.7780,
        "video": {
            "id": encode_id("Video", 1),
            "videoSources": {
                "high": {"src": "https://v.kickstarter.com/high.mp4"},
                "hls": {"src": "https://v.kickstarter.com/video.m3u8"},
            },
        },
    }


def make_project_query(backing_id=None):
    """A fetch-project query ``data`` object with two rewards and two add-ons."""
    project = make_project_fragment()
    project["rewards"] = {
        "nodes": [
            make_reward(8_173_901, "Notebook", amount="25.0", converted="19.45"),
            make_reward(8_173_902, "Notebook Bundle", amount="60.0", converted="46.68"),
        ]
    }
    project["addOns"] = {
        "nodes": [
            make_reward(
                8_190_320,
                "Paper Sticker Sheet",
                expanded_rules=[
                    copy.deepcopy(AUSTRALIA_SHIPPING),
                    copy.deepcopy(WORLDWIDE_SHIPPING),
                ],
            ),
            make_reward(
                8_190_321,
                "Vinyl Sticker Sheet",
                amount="6.0",
                converted="6.0",
                expanded_rules=[copy.deepcopy(AUSTRALIA_SHIPPING), None],
            ),
        ]
    }
    project["backing"] = {"id": encode_id("Backing", backing_id)} if backing_id else None
    return {"me": {"chosenCurrency": "USD"}, "project": project}


def make_backing_query(backing_id=1, status="pledged"):
    return {
        "backing": {
            "amount": {"amount": "29.0", "currency": "AUD", "symbol": "$"},
            "backer": {
                "chosenCurrency": "USD",
                "id": encode_id("User", 618_005_886),
                "imageUrl": None,
                "isCreator": False,
                "name": "Backer McGee",
                "uid": "618005886",
            },
            "id": encode_id("Backing", backing_id),
            "location": copy.deepcopy(LAUNCESTON),
            "pledgedOn": "1618000000",
            "sequence": 5,
            "shippingAmount": {"amount": "4.0", "currency": "AUD", "symbol": "$"},
            "status": status,
            "reward": make_reward(8_173_901, "Notebook", amount="25.0", converted="19.45"),
            "project": make_project_fragment(),
        }
    }


class Observer:
    """Collects every value sent on a signal."""

    def __init__(self, signal=None):
        self.values = []
        if signal is not None:
            signal.observe(self.values.append)

    @property
    def last_value(self):
        return self.values[-1] if self.values else None

    def __len__(self):
        return len(self.values)


@pytest.fixture
def project_fragment():
    return make_project_fragment()


@pytest.fixture
def project_query():
    return make_project_query()


@pytest.fixture
def observe():
    return Observer
