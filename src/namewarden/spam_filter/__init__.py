"""
Username spam filter.

Leaf modules first: ``confusables`` and ``name_normalizer`` are pure; the
resolvers read the Config Store; ``match_engine`` compares names;
``moderation_actuator`` bans; ``username_spam_filter`` is the event entry
point and ``config_workflow`` is the admin-facing approval flow.
"""
