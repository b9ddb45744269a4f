"""
Database Schemas

Pydantic models for the MongoDB collections and for the request bodies
the API accepts.

Collections:
- Account -> "users"
- Profile -> "profiles" (one per account, blog entries embedded)
- Post -> "posts" (likes embedded)

Request models carry their own messages: required fields default to an empty
value and are validated even when omitted, so a missing field and a blank
field fail with the same message.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from bson import ObjectId
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


class Account(BaseModel):
    """
    Registered user.
    Collection name: "users"
    """
    name: str = Field(..., description="Full name")
    username: str = Field(..., description="Unique handle")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="BCrypt password hash")
    avatar: Optional[str] = Field(None, description="Gravatar URL derived from the email")


class Social(BaseModel):
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class BlogEntry(BaseModel):
    """Embedded in Profile.blogpost, newest first."""
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    title: str
    content: str
    location: Optional[str] = None
    published: datetime
    updated: Optional[datetime] = None
    description: str


class Like(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: ObjectId


class Post(BaseModel):
    """
    Collection name: "posts"

    name, username and avatar are a copy of the owner's account taken when
    the post is created. They are not updated when the account changes.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: ObjectId
    name: str
    username: str
    avatar: Optional[str] = None
    content: str
    likes: List[Like] = Field(default_factory=list)


def required(message: str) -> AfterValidator:
    def check(value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(message)
        return value
    return AfterValidator(check)


def split_list(value: str) -> List[str]:
    """'python, go ,sql' -> ['python', 'go', 'sql']"""
    return [item.strip() for item in value.split(",") if item.strip()]


class RegisterRequest(BaseModel):
    name: Annotated[str, required("Name is required")] = Field("", validate_default=True)
    username: Annotated[str, required("Please provide a username")] = Field("", validate_default=True)
    email: str = Field("", validate_default=True)
    password: str = Field("", validate_default=True)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        try:
            validate_email(v.strip(), check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Please include a valid email address")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Please enter a password with 6 or more characters")
        return v


class LoginRequest(BaseModel):
    username: Annotated[str, required("Please enter your username")] = Field("", validate_default=True)
    password: Annotated[str, required("Please enter your password")] = Field("", validate_default=True)


class ProfileRequest(BaseModel):
    bio: Annotated[str, required("Bio field is required")] = Field("", validate_default=True)
    location: Annotated[str, required("Please enter your location")] = Field("", validate_default=True)
    skills: Annotated[str, required("Please list your skills")] = Field("", validate_default=True)
    hobbies: Annotated[str, required("Please list your hobbies")] = Field("", validate_default=True)
    website: Optional[str] = None
    githubusername: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    def social(self) -> Social:
        return Social(
            youtube=self.youtube or None,
            twitter=self.twitter or None,
            facebook=self.facebook or None,
            linkedin=self.linkedin or None,
            instagram=self.instagram or None,
        )

    def to_document(self) -> dict:
        """Fields to store on the profile. The owner is added by the caller."""
        doc = {
            "bio": self.bio,
            "location": self.location,
            "skills": split_list(self.skills),
            "hobbies": split_list(self.hobbies),
            "social": self.social().model_dump(exclude_none=True),
        }
        if self.website:
            doc["website"] = self.website
        if self.githubusername:
            doc["githubusername"] = self.githubusername
        return doc


class BlogPostRequest(BaseModel):
    title: Annotated[str, required("Please enter the title of your post")] = Field("", validate_default=True)
    content: Annotated[str, required("Content is required")] = Field("", validate_default=True)
    published: Annotated[Optional[datetime], required("Published date is required")] = Field(
        None, validate_default=True)
    description: Annotated[str, required("Please enter a short description of the content of your post")] = Field(
        "", validate_default=True)
    location: Optional[str] = None
    updated: Optional[datetime] = None

    def to_entry(self) -> BlogEntry:
        return BlogEntry(**self.model_dump())


class PostRequest(BaseModel):
    content: Annotated[str, required("Please add the content to your post")] = Field("", validate_default=True)


class TokenResponse(BaseModel):
    token: str
