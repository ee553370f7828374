"""
Keyword and emoji rule tables for chatbond.

Every table is an ordered dict: declaration order is the tie-break order used
by the classifier, so do not reorder entries casually.
"""

from typing import Dict, List

# ============================================================================
# EMOTIONS (12 categories)
# ============================================================================

EMOTION_KEYWORDS: Dict[str, List[str]] = {
    "joy": [
        "happy", "great", "wonderful", "awesome", "fantastic", "perfect",
        "haha", "hahaha", "hehe", "lol", "lmao", "lmfao", "rofl", "yay",
        "nice", "fun", "enjoy", "enjoyed", "glad", "delighted", "cheerful",
        "joy", "smile", "smiling", "lovely", "cool", "best", "excellent",
        "sounds good", "aww", "cute", "blessed",
        "😊", "😄", "😁", "😂", "🤣", "😃", "😀", "🙂", "☺️", "😅",
    ],
    "sadness": [
        "sad", "cry", "crying", "hurt", "hurting", "lonely", "alone",
        "depressed", "upset", "disappointed", "heartbroken", "miserable",
        "gloomy", "grief", "sorrow", "ugh", "bummer", "exhausted", "drained",
        "broken", "crushed", "devastated", "hopeless", "empty", "numb",
        "😢", "😭", "😔", "☹️", "😞", "💔", "😥", "😪", "🙁", "😿",
    ],
    "anger": [
        "angry", "mad", "hate", "annoyed", "annoying", "frustrated",
        "frustrating", "furious", "pissed", "irritated", "irritating",
        "sick of", "fed up", "outraged", "livid", "wtf", "ffs", "smh",
        "ridiculous", "unacceptable", "disgusting", "bullshit", "nonsense",
        "screw this", "driving me crazy", "getting on my nerves",
        "😠", "😡", "🤬", "😤", "💢",
    ],
    "affection": [
        "love you", "love u", "miss you", "miss u", "ily", "luv u",
        "thinking of you", "care about", "adore", "sweetheart", "darling",
        "honey", "baby", "babe", "bae", "cutie", "sweetie", "my love",
        "treasure", "cherish", "kiss", "kisses", "hug", "hugs", "cuddle",
        "cuddles", "embrace", "xoxo", "muah", "sweet dreams", "take care",
        "💑", "💏", "🫂", "😘", "😻", "💝", "💋", "🥰", "😍", "💞", "💓",
        "💗", "💖", "💕", "❣️", "💌", "❤️",
    ],
    "gratitude": [
        "thank you", "thanks", "thank u", "thx", "thanx", "ty", "tysm",
        "appreciate", "appreciated", "grateful", "thankful", "much appreciated",
        "means a lot", "lifesaver", "life saver", "owe you", "god bless",
        "lucky to have", "🙏",
    ],
    "apology": [
        "sorry", "sry", "apologize", "apologise", "apologies", "apology",
        "my bad", "my fault", "forgive me", "please forgive", "my mistake",
        "messed up", "didn't mean", "didnt mean", "shouldn't have",
        "feel bad", "feel terrible",
    ],
    "anxiety": [
        "worried", "worry", "worrying", "nervous", "anxious", "stress",
        "stressed", "overwhelmed", "scared", "afraid", "fear", "panic",
        "panicking", "freaking out", "tense", "uneasy", "insecure",
        "terrified", "can't cope", "cant cope", "under pressure", "on edge",
        "😰", "😨", "😱", "😟", "😧",
    ],
    "excitement": [
        "excited", "can't wait", "cant wait", "looking forward", "thrilled",
        "pumped", "hyped", "stoked", "omg", "wow", "woohoo", "lets go",
        "let's go", "no way", "incredible", "amazing", "mind blown",
        "so excited", "finally", "🤩", "🎉", "🥳", "🤯", "🎊", "🔥", "✨",
    ],
    "trust": [
        "trust", "believe", "confident", "faith", "rely", "depend on",
        "count on", "honest", "truthful", "genuine", "reliable", "loyal",
        "committed", "sincere",
    ],
    "betrayal": [
        "betrayed", "lied", "cheated", "deceived", "dishonest", "unfaithful",
        "backstabbed", "two-faced", "fake", "manipulated", "abandoned",
        "let down", "broken promise",
    ],
    "pride": [
        "proud", "accomplished", "achieved", "successful", "triumph",
        "victory", "nailed it", "impressive", "well done",
    ],
    "shame": [
        "ashamed", "embarrassed", "humiliated", "mortified", "disgrace",
        "guilty", "shameful", "regretful",
    ],
}

EMOTIONS: List[str] = list(EMOTION_KEYWORDS)

POSITIVE_EMOTIONS = ("joy", "affection", "gratitude", "excitement", "trust", "pride")
NEGATIVE_EMOTIONS = ("sadness", "anger", "anxiety", "apology", "betrayal", "shame")

# Categories compared between participants for emotion synchrony
SYNCHRONY_EMOTIONS = (
    "joy", "sadness", "anger", "affection", "gratitude",
    "apology", "anxiety", "excitement", "neutral",
)

# ============================================================================
# CONVERSATION CONTEXT
# ============================================================================

CONTEXT_KEYWORDS: Dict[str, List[str]] = {
    "business": [
        "meeting", "client", "proposal", "contract", "revenue", "profit",
        "budget", "investment", "strategy", "market", "sales", "marketing",
        "stakeholder", "quarterly", "invoice", "forecast", "kpi", "roi",
    ],
    "professional": [
        "work", "job", "career", "office", "boss", "manager", "colleague",
        "coworker", "interview", "promotion", "salary", "performance review",
        "onboarding", "recruiter", "payroll", "standup",
    ],
    "project": [
        "project", "milestone", "deliverable", "sprint", "roadmap", "scope",
        "task", "tasks", "timeline", "prototype", "launch", "backlog",
    ],
    "love": [
        "love you", "miss you", "date night", "girlfriend", "boyfriend",
        "wife", "husband", "anniversary", "romantic", "kiss", "cuddle",
        "babe", "baby", "sweetheart", "darling", "my love",
    ],
    "friendship": [
        "bro", "dude", "buddy", "bestie", "bff", "friend", "friends",
        "hang out", "hangout", "party", "squad",
    ],
    "family": [
        "mom", "mum", "dad", "mother", "father", "sister", "brother",
        "grandma", "grandpa", "aunt", "uncle", "cousin", "family", "kids",
    ],
    "conflict": [
        "argue", "argument", "fight", "fighting", "yelling", "blame",
        "your fault", "not fair", "upset with", "angry at", "stop it",
    ],
    "technical": [
        "code", "bug", "debug", "deploy", "server", "database", "api",
        "commit", "merge", "pull request", "frontend", "backend", "python",
        "javascript", "error", "stack trace",
    ],
    "support": [
        "help", "support", "therapy", "therapist", "counselor", "vent",
        "listen", "here for you", "mental health", "cope",
    ],
}

CONTEXTS: List[str] = list(CONTEXT_KEYWORDS)

# ============================================================================
# COMMUNICATION PATTERNS
# ============================================================================

COMMUNICATION_PATTERNS: Dict[str, List[str]] = {
    "assertive": [
        "i think", "i feel", "i believe", "my opinion", "i would like",
        "i prefer", "i'd appreciate", "let's discuss", "lets discuss",
        "can we talk", "i need", "i'd rather", "to be honest",
        "let me be clear", "let's be clear",
    ],
    "passiveAggressive": [
        "fine", "whatever", "if you say so", "i guess", "nevermind",
        "never mind", "forget it", "ok then", "do what you want",
        "as usual", "you win", "as you wish", "good for you", "cool story",
    ],
    "defensive": [
        "but i", "but you", "that's not fair", "thats not fair",
        "you always", "you never", "why do you", "stop blaming",
        "not my fault", "you started", "what about you", "at least i",
        "you misunderstood", "i was just saying", "you're exaggerating",
    ],
    "supportive": [
        "i'm here", "im here", "you can do it", "you got this",
        "believe in you", "proud of you", "good job", "well done",
        "you're doing great", "keep going", "don't give up", "dont give up",
        "i'm with you", "i support you", "take your time", "stay strong",
        "here for you",
    ],
    "planning": [
        "let's plan", "lets plan", "we should", "we could", "how about",
        "schedule", "arrange", "organize", "tomorrow", "next week",
        "deadline", "can we meet", "next steps", "going forward",
    ],
    "questioning": [
        "what", "when", "where", "why", "how", "who", "which", "?",
        "wondering", "curious", "do you know", "can you explain",
        "are you sure", "what happened",
    ],
    "agreeing": [
        "yes", "yeah", "yep", "absolutely", "definitely", "exactly",
        "agreed", "i agree", "makes sense", "of course", "fair enough",
        "works for me", "true",
    ],
    "disagreeing": [
        "no", "nope", "nah", "disagree", "don't think so", "dont think so",
        "not sure", "maybe not", "i don't think", "actually", "however",
        "although", "i see it differently", "not exactly",
    ],
}

PATTERNS: List[str] = list(COMMUNICATION_PATTERNS)

# ============================================================================
# TOXICITY
# ============================================================================

TOXICITY_KEYWORDS: Dict[str, List[str]] = {
    "insults": [
        "idiot", "stupid", "dumb", "moron", "loser", "pathetic", "worthless",
        "useless", "incompetent", "clown", "fool", "braindead",
        "waste of space",
    ],
    "aggression": [
        "hate you", "shut up", "leave me alone", "go away", "screw you",
        "try me", "don't test me", "i'm done with you", "watch yourself",
        "you'll regret",
    ],
    "dismissive": [
        "don't care", "dont care", "who cares", "so what", "your problem",
        "not my problem", "deal with it", "get over it", "lol ok",
        "nice try", "who even asked",
    ],
    "manipulation": [
        "just like you", "should have known", "told you so", "same old you",
        "prove me wrong", "you clearly don't care", "no wonder",
        "you can't do anything right",
    ],
    "blame": [
        "your fault", "you made me", "because of you", "you ruined",
        "blame you", "you caused", "you messed up", "you started it",
        "you're the reason", "you're the problem",
    ],
}

TOXICITY_CATEGORIES: List[str] = list(TOXICITY_KEYWORDS)

# ============================================================================
# AFFECTION
# ============================================================================

AFFECTION_KEYWORDS = [
    "love", "miss", "care", "adore", "treasure", "cherish", "sweetheart",
    "darling", "honey", "babe", "baby", "hug", "kiss", "cuddle", "embrace",
]

AFFECTION_EMOJIS = ["❤️", "💕", "💖", "💗", "💓", "💞", "💝", "😘", "😍", "🥰", "😻", "💑", "💏"]

# ============================================================================
# WORD FREQUENCY
# ============================================================================

STOPWORDS = frozenset([
    "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
    "had", "her", "was", "one", "our", "out", "has", "his", "how", "its",
    "may", "new", "now", "old", "see", "two", "who", "did", "get", "him",
    "she", "too", "use", "that", "with", "have", "this", "will", "your",
    "from", "they", "know", "want", "been", "good", "much", "some", "time",
    "very", "when", "come", "here", "just", "like", "long", "make", "many",
    "more", "only", "over", "such", "take", "than", "them", "well", "were",
    "what", "then", "there", "their", "would", "could", "should", "about",
    "also", "into", "yeah", "okay", "omitted", "media", "image", "video",
    "message", "deleted", "http", "https", "www", "com", "i'm", "it's",
    "don", "didn", "doesn", "isn", "wasn", "aren", "won", "yes",
])

# ============================================================================
# BADGE PHRASE LISTS
# ============================================================================

SUPPORT_PHRASES = [
    "you got this", "proud of you", "you can do it", "believe in you",
    "i'm here for you", "im here for you", "keep going", "you're amazing",
    "you are amazing", "go for it",
]
OPTIMISM_WORDS = ["great", "awesome", "amazing", "wonderful", "fantastic"]
LAUGHTER_WORDS = ["lol", "lmao", "rofl", "haha", "lmfao"]
MEME_WORDS = ["meme", "vibe", "sus", "bruh", "fr fr", "no cap"]
DEBATE_WORDS = ["but", "however", "actually", "disagree", "think differently"]
HONESTY_PHRASES = [
    "to be honest", "tbh", "honestly", "let me be real", "truth is",
    "not gonna lie", "ngl",
]
PASSION_WORDS = ["passionate", "obsessed", "love this", "so into", "can't stop"]
CURT_REPLIES = ["whatever", "sure", "fine", "ok", "k"]
VOICE_NOTE_MARKERS = ["voice note", "vn", "🎤"]
