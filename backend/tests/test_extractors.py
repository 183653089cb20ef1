"""
Tests for page classification and field extraction.

Pages are small HTML fragments shaped like the Canvas markup the
selectors target; no browser is involved.
"""

import logging

import pytest
from bs4 import BeautifulSoup

from canvas_sync.scraper.extractors import (
    NO_DUE_DATE,
    UNKNOWN_CLASS,
    ContentType,
    classify_content,
    clean_due_text,
    extract_class_name,
    scrape_assignment_data,
    scrape_discussion_data,
    scrape_quiz_data,
)
from canvas_sync.scraper.selectors import SELECTORS, css, get_selector_context


def breadcrumbs(first="Courses", second="ATLS 5420-001"):
    return (
        '<div id="breadcrumbs"><ul>'
        f'<li><a href="/"><span>{first}</span></a></li>'
        f'<li><a href="/courses/1"><span>{second}</span></a></li>'
        "</ul></div>"
    )


ASSIGNMENT_BODY = (
    '<div id="assignment-student-header-content"><h1 data-testid="title">Essay 1</h1></div>'
    '<span data-testid="due-date">Due: Mon Sep 22, 2025 by 4:00pm</span>'
    '<div data-testid="assignments-2-assignment-toggle-details-text"><p>Write</p><p>two pages</p></div>'
)

QUIZ_BODY = (
    '<div id="quiz_show"><h1 id="quiz_title">Quiz 3</h1>'
    '<ul id="quiz_student_details"><li><span>Due</span><span><span>Sep 23 at 11:59pm</span></span></li></ul>'
    "</div>"
)

DISCUSSION_BODY = (
    '<h1 class="discussion-title">Welcome to week 4</h1>'
    '<div class="discussion-pubdate">Sep 20, 2025 at 10:13am</div>'
    '<div class="discussion-section message_wrapper"><p>Read chapter 4.</p></div>'
    '<a class="discussion-reply-action discussion-reply-box" href="#">Reply</a>'
)


def page(body, crumbs=None):
    crumbs = breadcrumbs() if crumbs is None else crumbs
    return BeautifulSoup(f'<html><body>{crumbs}<div id="content">{body}</div></body></html>', "html.parser")


class TestCleanDueText:
    def test_strips_prefix_and_by(self):
        assert clean_due_text("Due: Mon Sep 22, 2025 by 4:00pm") == "Mon Sep 22, 2025 4:00pm"

    def test_removes_every_by(self):
        assert " by " not in clean_due_text("Due: Sep 22 by noon by 4:00pm")

    def test_repeated_prefix(self):
        assert clean_due_text("Due: Due: Sep 22") == "Sep 22"

    def test_plain_text_untouched(self):
        assert clean_due_text("Sep 23 at 11:59pm") == "Sep 23 at 11:59pm"


class TestClassify:
    def test_assignment(self):
        assert classify_content(page(ASSIGNMENT_BODY)) == ContentType.ASSIGNMENT

    def test_quiz(self):
        assert classify_content(page(QUIZ_BODY)) == ContentType.QUIZ

    def test_assignment_wins_over_quiz(self):
        assert classify_content(page(ASSIGNMENT_BODY + QUIZ_BODY)) == ContentType.ASSIGNMENT

    def test_announcement(self):
        soup = page(DISCUSSION_BODY, breadcrumbs(first="Announcements"))
        assert classify_content(soup) == ContentType.DISCUSSION

    def test_discussion_without_announcements_crumb_is_unknown(self):
        soup = page(DISCUSSION_BODY, breadcrumbs(first="Discussions"))
        assert classify_content(soup) == ContentType.UNKNOWN

    def test_empty_page_is_unknown(self):
        assert classify_content(page("<p>Module overview</p>")) == ContentType.UNKNOWN


class TestExtractors:
    def test_assignment_fields(self):
        fields = scrape_assignment_data(page(ASSIGNMENT_BODY))
        assert fields.title == "Essay 1"
        assert fields.due_date == "Mon Sep 22, 2025 4:00pm"
        assert fields.description == "Write\ntwo pages"

    def test_assignment_missing_fields_fall_back(self, caplog):
        soup = page('<div id="assignment-student-header-content"></div>')
        with caplog.at_level(logging.WARNING):
            fields = scrape_assignment_data(soup)
        assert fields.title == "Untitled Assignment"
        assert fields.due_date == NO_DUE_DATE
        assert fields.description == ""
        assert "title" in caplog.text

    def test_quiz_has_no_description(self):
        fields = scrape_quiz_data(page(QUIZ_BODY))
        assert fields.title == "Quiz 3"
        assert fields.due_date == "Sep 23 at 11:59pm"
        assert fields.description is None

    def test_discussion_fields(self):
        fields = scrape_discussion_data(page(DISCUSSION_BODY, breadcrumbs(first="Announcements")))
        assert fields.title == "Welcome to week 4"
        assert fields.due_date == "Sep 20, 2025 at 10:13am"
        assert fields.description == "Read chapter 4."

    def test_class_name(self):
        assert extract_class_name(page(QUIZ_BODY)) == "ATLS 5420-001"

    def test_class_name_missing(self):
        assert extract_class_name(page(QUIZ_BODY, crumbs="")) == UNKNOWN_CLASS


class TestSelectors:
    def test_context_lookup(self):
        assert get_selector_context("quiz") is SELECTORS["quiz"]

    def test_unknown_context(self):
        with pytest.raises(ValueError):
            get_selector_context("gradebook")

    def test_css_rejects_non_css_locator(self):
        with pytest.raises(ValueError):
            css(("xpath", "//div"))
