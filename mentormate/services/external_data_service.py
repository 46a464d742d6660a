# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Small real-world context snippets for mentors: weather, quotes, health tips
and upbeat news. Only weather has a live source (OpenWeather); everything
else, and weather without a key, comes from the static tables below.
"""

import enum
import logging
import random
from typing import Any, Dict, Optional

import requests

from mentormate.utils.settings import DEFAULT_WEATHER_URL, Settings

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "New York"


class ExternalDataType(str, enum.Enum):
    weather = "weather"
    motivation_quote = "motivation_quote"
    health_tip = "health_tip"
    news_summary = "news_summary"


# -------------------------------
# Static tables
# -------------------------------

WEATHER_ADVICE = {
    "Clear": "Perfect weather for outdoor activities! Consider a walk or run.",
    "Clouds": "Great day for any activity! Maybe try something new outdoors.",
    "Rain": "Indoor workout day! Perfect time for yoga or home exercises.",
    "Snow": "Bundle up if going outside, or enjoy a cozy indoor session.",
    "sunny": "Sunny day ahead! Don't forget sunscreen if exercising outside.",
    "cloudy": "Comfortable weather for most activities.",
    "rainy": "Rainy day - perfect for indoor reflection and planning.",
    "partly cloudy": "Nice balanced weather for any type of activity!",
}
DEFAULT_WEATHER_ADVICE = "Whatever the weather, you can adapt your goals to fit!"
MOCK_CONDITIONS = ["sunny", "cloudy", "rainy", "partly cloudy"]

QUOTES = {
    "fitness": [
        "The only bad workout is the one that didn't happen.",
        "Your body can do it. It's your mind you need to convince.",
        "Fitness is not about being better than someone else. It's about being better than you used to be.",
        "The groundwork for all happiness is good health.",
        "Take care of your body. It's the only place you have to live.",
    ],
    "wellness": [
        "Self-care is not a luxury. It's a necessity.",
        "You are enough just as you are. Each moment you choose yourself, you grow.",
        "Mental health is not a destination, but a process.",
        "Be patient with yourself. You are growing daily.",
        "Your mental health is a priority. Your happiness is essential.",
    ],
    "career": [
        "Success is not final, failure is not fatal: it is the courage to continue that counts.",
        "The way to get started is to quit talking and begin doing.",
        "Innovation distinguishes between a leader and a follower.",
        "Your limitation is only your imagination.",
        "Don't wait for opportunity. Create it.",
    ],
    "general": [
        "Progress, not perfection.",
        "Small steps daily lead to big changes yearly.",
        "You are capable of amazing things.",
        "Every day is a new beginning.",
        "Believe in yourself and all that you are.",
    ],
}

HEALTH_TIPS = {
    "nutrition": [
        "Try to fill half your plate with vegetables at each meal.",
        "Drink a glass of water before each meal to help with hydration and portion control.",
        "Include protein in every meal to help maintain stable energy levels.",
        "Choose whole grains over refined grains when possible.",
        "Eat slowly and mindfully to improve digestion and satisfaction.",
    ],
    "exercise": [
        "Take the stairs instead of the elevator when possible.",
        "Try to get at least 150 minutes of moderate exercise per week.",
        "Include both cardio and strength training in your routine.",
        "Even 10 minutes of movement counts towards your daily activity.",
        "Listen to your body and rest when you need to.",
    ],
    "sleep": [
        "Aim for 7-9 hours of sleep each night for optimal health.",
        "Keep your bedroom cool, dark, and quiet for better sleep quality.",
        "Avoid screens for at least 1 hour before bedtime.",
        "Establish a consistent bedtime routine to signal your body it's time to sleep.",
        "If you can't fall asleep within 20 minutes, get up and do a quiet activity until you feel sleepy.",
    ],
    "mental": [
        "Practice deep breathing for 5 minutes to reduce stress.",
        "Take regular breaks throughout your day to reset your mind.",
        "Connect with nature, even if it's just looking out a window.",
        "Practice gratitude by writing down 3 things you're thankful for.",
        "Limit negative news consumption to protect your mental wellbeing.",
    ],
}

NEWS = {
    "wellness": [
        "New research shows that just 10 minutes of daily meditation can improve focus and reduce anxiety.",
        "Scientists discover that spending time in nature for just 20 minutes can significantly lower stress hormones.",
        "Study finds that people who practice gratitude are 25% happier and have better relationships.",
    ],
    "technology": [
        "AI breakthrough helps doctors detect diseases earlier with 95% accuracy.",
        "New sustainable technology converts ocean plastic into useful materials.",
        "Breakthrough in renewable energy storage could revolutionize clean power.",
    ],
    "fitness": [
        "Research confirms that regular walking can add years to your life and improve brain health.",
        "New study shows strength training just twice a week provides significant health benefits.",
        "Scientists find that even short bursts of activity throughout the day boost metabolism.",
    ],
    "general": [
        "Community gardens are sprouting up worldwide, bringing people together and improving local food security.",
        "Global literacy rates reach all-time high as educational access expands.",
        "Renewable energy becomes cheapest power source in most countries worldwide.",
    ],
}


def weather_advice(condition: Optional[str]) -> str:
    return WEATHER_ADVICE.get(condition or "", DEFAULT_WEATHER_ADVICE)


class ExternalDataService:
    def __init__(self, weather_api_key: Optional[str] = None, weather_api_url: str = DEFAULT_WEATHER_URL,
                 timeout: float = 10.0, session: Optional[requests.Session] = None,
                 rng: Optional[random.Random] = None):
        self.weather_api_key = weather_api_key
        self.weather_api_url = weather_api_url
        self.timeout = timeout
        self.http = session or requests.Session()
        self.rng = rng or random.Random()

    def fetch(self, data_type, location: Optional[str] = None, category: Optional[str] = None) -> Dict[str, Any]:
        data_type = ExternalDataType(getattr(data_type, "value", data_type))
        if data_type == ExternalDataType.weather:
            return self.get_weather(location or DEFAULT_LOCATION)
        if data_type == ExternalDataType.motivation_quote:
            return self.get_motivation_quote(category)
        if data_type == ExternalDataType.health_tip:
            return self.get_health_tip(category)
        return self.get_news_summary(category)

    def get_weather(self, location: str = DEFAULT_LOCATION) -> Dict[str, Any]:
        if not self.weather_api_key:
            condition = self.rng.choice(MOCK_CONDITIONS)
            return {
                "location": location,
                "temperature": self.rng.randint(10, 39),
                "condition": condition,
                "humidity": self.rng.randint(40, 79),
                "advice": weather_advice(condition),
            }

        try:
            response = self.http.get(
                self.weather_api_url,
                params={"q": location, "appid": self.weather_api_key, "units": "metric"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
            return {
                "location": data["name"],
                "temperature": round(data["main"]["temp"]),
                "condition": data["weather"][0]["description"],
                "humidity": data["main"]["humidity"],
                "advice": weather_advice(data["weather"][0]["main"]),
            }
        except (requests.exceptions.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning("⚠️ Weather lookup failed for %s: %s", location, e)
            return {
                "location": location,
                "temperature": 22,
                "condition": "pleasant",
                "humidity": 60,
                "advice": "Perfect weather for a walk or outdoor exercise!",
            }

    def get_motivation_quote(self, category: Optional[str] = None) -> Dict[str, Any]:
        quotes = QUOTES.get(category or "", QUOTES["general"])
        return {
            "quote": self.rng.choice(quotes),
            "category": category or "general",
            "author": "MentorMate Collection",
        }

    def get_health_tip(self, category: Optional[str] = None) -> Dict[str, Any]:
        tips = HEALTH_TIPS.get(category or "", HEALTH_TIPS["mental"])
        return {
            "tip": self.rng.choice(tips),
            "category": category or "general",
            "source": "Health & Wellness Guidelines",
        }

    def get_news_summary(self, category: Optional[str] = None) -> Dict[str, Any]:
        items = NEWS.get(category or "", NEWS["general"])
        return {
            "headline": self.rng.choice(items),
            "category": category or "general",
            "source": "Positive News Network",
            "summary": f"Positive developments in {category or 'various fields'} continue to show progress and hope.",
        }

    # -------------------------------
    # Prompt enrichment
    # -------------------------------

    def enhance_mentor_prompt(self, base_prompt: str, mentor_category: Optional[str],
                              location: Optional[str] = None) -> str:
        """Append category-specific context to a system prompt. Returns the base prompt on any failure."""
        try:
            if mentor_category == "fitness":
                weather = self.get_weather(location or DEFAULT_LOCATION)
                tip = self.get_health_tip("exercise")
                extra = (
                    "Current Context:\n"
                    f"- Weather in {weather['location']}: {weather['temperature']}°C, {weather['condition']}\n"
                    f"- Weather advice: {weather['advice']}\n"
                    f"- Health tip: {tip['tip']}\n\n"
                    "Incorporate this information naturally into your response if relevant."
                )
            elif mentor_category == "wellness":
                quote = self.get_motivation_quote("wellness")
                tip = self.get_health_tip("mental")
                extra = (
                    "Inspiration for today:\n"
                    f"- Quote: \"{quote['quote']}\"\n"
                    f"- Wellness tip: {tip['tip']}\n\n"
                    "You can reference these if they help support the user."
                )
            elif mentor_category == "career":
                news = self.get_news_summary("technology")
                quote = self.get_motivation_quote("career")
                extra = (
                    "Professional Context:\n"
                    f"- Industry insight: {news['headline']}\n"
                    f"- Motivational quote: \"{quote['quote']}\"\n\n"
                    "Use this context to provide relevant career guidance."
                )
            elif mentor_category == "study":
                tip = self.get_health_tip("mental")
                quote = self.get_motivation_quote("general")
                extra = (
                    "Learning Support:\n"
                    f"- Focus tip: {tip['tip']}\n"
                    f"- Motivation: \"{quote['quote']}\"\n\n"
                    "Incorporate these insights to enhance your study guidance."
                )
            else:
                return base_prompt
        except Exception as e:
            logger.error("❌ Could not enrich prompt for %s mentor: %s", mentor_category, e)
            return base_prompt
        return f"{base_prompt}\n\n{extra}"

    def nudge_context(self, pattern_type: str, location: Optional[str] = None) -> str:
        """One line of outside context for a proactive nudge, or '' when there is none."""
        try:
            if pattern_type == "missed_checkins":
                weather = self.get_weather(location or DEFAULT_LOCATION)
                return f"Current weather is {weather['condition']} with {weather['temperature']}°C - {weather['advice']}"
            if pattern_type == "low_mood":
                return f"Here's some inspiration: \"{self.get_motivation_quote('wellness')['quote']}\""
            if pattern_type == "goal_struggle":
                return f"Helpful tip: {self.get_health_tip('mental')['tip']}"
            if pattern_type == "celebration":
                return f"Celebrating with: \"{self.get_motivation_quote('general')['quote']}\""
        except Exception as e:
            logger.error("❌ Could not build nudge context for %s: %s", pattern_type, e)
        return ""


def build_external_data_service(settings: Settings) -> ExternalDataService:
    return ExternalDataService(
        weather_api_key=settings.openweather_api_key,
        weather_api_url=settings.openweather_api_url,
    )
