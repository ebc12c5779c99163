"""Squawker: push-fed squawk store with topic subscriptions."""
