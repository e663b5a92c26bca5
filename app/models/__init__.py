"""Pydantic models for API requests and responses."""
from .author_model import AuthorWrapper
from .book_model import Book, BookCreate, BookDetail
from .category_model import Category, CategoryCreate, CategoryWrapper
from .checkout_model import Purchase, PurchaseConfirmation
from .comment_model import Comment, CommentCreate, CommentView
from .page_model import Page
from .rating_model import Rating, RatingCreate
from .user_model import AccountDetails, SignupRequest, Token, User, UserCreate
