#
# azblueprint/paging.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Generic continuation-token page walker shared by every list operation.
'''
import logging

from azblueprint.base_defaults import LOGGER_NAME_DEFAULT

class Page():
    '''
    One page of results. continuation_token is None or empty
    on the last page; otherwise it must be passed back unchanged
    to fetch the next page.
    '''
    def __init__(self, items, continuation_token=None):
        self.items = list(items)
        self.continuation_token = continuation_token

    def __repr__(self):
        return "%s(items=<%d>, continuation_token=%r)" % (type(self).__name__, len(self.items), self.continuation_token)

    @property
    def more(self):
        '''
        Return whether another page follows this one
        '''
        return bool(self.continuation_token)

def walk_pages(fetch_page, logger=None):
    '''
    Generate every item of a paged sequence.
    fetch_page(token) returns a Page. The first call passes None.
    Each later call passes exactly the token returned by the previous
    page. Pages are fetched one at a time and only when the caller has
    consumed the items before them. Items are yielded in the order received.
    '''
    logger = logger or logging.getLogger(LOGGER_NAME_DEFAULT)
    token = None
    page_num = 0
    while True:
        page = fetch_page(token)
        page_num += 1
        logger.debug("walk_pages page %d items=%d more=%s", page_num, len(page.items), page.more)
        yield from page.items
        if not page.more:
            return
        token = page.continuation_token

def pager_page_fetcher(make_pager):
    '''
    Adapt an azure-core ItemPaged factory to the fetch_page protocol of walk_pages().
    make_pager() returns a fresh azure.core.paging.ItemPaged. Each fetch
    resumes that pager at the given continuation token and reads one page.
    '''
    def fetch_page(token):
        pages = make_pager().by_page(continuation_token=token)
        items = list(next(pages, []))
        return Page(items, continuation_token=pages.continuation_token)
    return fetch_page
