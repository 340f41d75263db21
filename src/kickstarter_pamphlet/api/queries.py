"""GraphQL documents sent to ``/graph``.

Field names and nesting here must match what the parsers read.
"""

MONEY_FRAGMENT = """fragment MoneyFragment on Money { amount currency symbol }"""

LOCATION_FRAGMENT = """fragment LocationFragment on Location {
  country
  countryName
  displayableName
  id
  localizedName(locale: "en")
  name
}"""

COUNTRY_FRAGMENT = """fragment CountryFragment on Country { code name }"""

CATEGORY_FRAGMENT = """fragment CategoryFragment on Category {
  id
  name
  analyticsName
  parentCategory { id name }
}"""

USER_FRAGMENT = """fragment UserFragment on User {
  chosenCurrency
  id
  imageUrl: imageUrl(blur: false, width: 1024)
  isCreator
  name
  uid
}"""

SHIPPING_RULE_FRAGMENT = """fragment ShippingRuleFragment on ShippingRule {
  cost { ...MoneyFragment }
  id
  location { ...LocationFragment }
}"""

REWARD_FRAGMENT = """fragment RewardFragment on Reward {
  allowedAddons { nodes { id } }
  amount { ...MoneyFragment }
  backersCount
  convertedAmount { ...MoneyFragment }
  description
  endsAt
  estimatedDeliveryOn
  id
  items { nodes { id name } }
  limit
  limitPerBacker
  name
  project { id }
  remainingQuantity
  shippingPreference
  shippingRules { ...ShippingRuleFragment }
  startsAt
}"""

PROJECT_FRAGMENT = """fragment ProjectFragment on Project {
  availableCardTypes
  backersCount
  canComment
  category { ...CategoryFragment }
  commentsCount
  country { ...CountryFragment }
  creator { ...UserFragment }
  currency
  deadlineAt
  description
  environmentalCommitments { commitmentCategory description id }
  faqs { nodes { answer createdAt id question } }
  finalCollectionDate
  fxRate
  goal { ...MoneyFragment }
  image { id url(width: 1024) }
  isLaunched
  isProjectOfTheDay
  isProjectWeLove
  isWatched
  launchedAt
  location { ...LocationFragment }
  minPledge
  name
  pid
  pledged { ...MoneyFragment }
  posts { totalCount }
  prelaunchActivated
  risks
  slug
  state
  stateChangedAt
  story
  tags(scope: DISCOVER) { name }
  url
  usdExchangeRate
  video { id videoSources { high { src } hls { src } } }
}"""

BACKING_FRAGMENT = """fragment BackingFragment on Backing {
  amount { ...MoneyFragment }
  backer { ...UserFragment }
  id
  location { ...LocationFragment }
  pledgedOn
  sequence
  shippingAmount { ...MoneyFragment }
  status
}"""

_PROJECT_FRAGMENTS = "\n".join(
    [
        PROJECT_FRAGMENT,
        CATEGORY_FRAGMENT,
        COUNTRY_FRAGMENT,
        USER_FRAGMENT,
        LOCATION_FRAGMENT,
        MONEY_FRAGMENT,
    ]
)

_REWARD_FRAGMENTS = "\n".join([REWARD_FRAGMENT, SHIPPING_RULE_FRAGMENT])

_PROJECT_SELECTION = """
    ...ProjectFragment
    backing { id }
    addOns { nodes { ...RewardFragment } }
    rewards { nodes { ...RewardFragment } }
"""

FETCH_PROJECT_BY_ID = (
    "query FetchProjectById($projectId: Int!) {\n"
    "  me { chosenCurrency }\n"
    "  project(pid: $projectId) {" + _PROJECT_SELECTION + "  }\n"
    "}\n" + _PROJECT_FRAGMENTS + "\n" + _REWARD_FRAGMENTS
)

FETCH_PROJECT_BY_SLUG = (
    "query FetchProjectBySlug($slug: String!) {\n"
    "  me { chosenCurrency }\n"
    "  project(slug: $slug) {" + _PROJECT_SELECTION + "  }\n"
    "}\n" + _PROJECT_FRAGMENTS + "\n" + _REWARD_FRAGMENTS
)

FETCH_ADD_ONS = (
    "query FetchAddOns($projectSlug: String!, $locationId: ID) {\n"
    "  me { chosenCurrency }\n"
    "  project(slug: $projectSlug) {\n"
    "    ...ProjectFragment\n"
    "    addOns {\n"
    "      nodes {\n"
    "        ...RewardFragment\n"
    "        shippingRulesExpanded(forLocation: $locationId) {\n"
    "          nodes { ...ShippingRuleFragment }\n"
    "        }\n"
    "      }\n"
    "    }\n"
    "  }\n"
    "}\n" + _PROJECT_FRAGMENTS + "\n" + _REWARD_FRAGMENTS
)

FETCH_BACKING = (
    "query FetchBacking($id: ID!) {\n"
    "  backing(id: $id) {\n"
    "    ...BackingFragment\n"
    "    reward { ...RewardFragment }\n"
    "    project { ...ProjectFragment }\n"
    "  }\n"
    "}\n" + BACKING_FRAGMENT + "\n" + _PROJECT_FRAGMENTS + "\n" + _REWARD_FRAGMENTS
)

FETCH_PROJECT_FRIENDS_BY_ID = (
    "query FetchProjectFriendsById($projectId: Int!) {\n"
    "  project(pid: $projectId) { friends { nodes { ...UserFragment } } }\n"
    "}\n" + USER_FRAGMENT
)

FETCH_PROJECT_FRIENDS_BY_SLUG = (
    "query FetchProjectFriendsBySlug($slug: String!) {\n"
    "  project(slug: $slug) { friends { nodes { ...UserFragment } } }\n"
    "}\n" + USER_FRAGMENT
)

FETCH_USER = (
    "query FetchUser($id: ID!) {\n"
    "  user: node(id: $id) { ... on User { ...UserFragment } }\n"
    "}\n" + USER_FRAGMENT
)

SEND_MESSAGE = (
    "mutation SendMessage($input: SendMessageInput!) {\n"
    "  sendMessage(input: $input) {\n"
    "    message { id body createdAt sender { ...UserFragment } recipient { ...UserFragment } }\n"
    "  }\n"
    "}\n" + USER_FRAGMENT
)
