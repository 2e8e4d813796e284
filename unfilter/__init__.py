"""
/**
 * @file unfilter/__init__.py
 * @description unfilter-the-hr 后端：HR 黑话翻译中转服务。
 */
"""
